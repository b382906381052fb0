"""Shell integration scripts emitted by ``git wt --init <shell>``.

Each script defines completion for ``git wt`` and, unless ``--nocd`` was
given, a ``git`` wrapper function. The wrapper runs the real command with
GIT_WT_SHELL_INTEGRATION=1, and when it succeeds and the last stdout line
is a directory it changes into it. A line starting with ``#nocd `` (or
wt.nocd=true / --nocd) means "print the path, stay where you are".
"""

from git_wt.exceptions import UsageError
from git_wt.constants import SUPPORTED_SHELLS

BASH_GIT_WRAPPER = r'''
# Override git command to cd after 'git wt <branch>'
git() {
    if [[ "$1" == "wt" ]]; then
        shift
        local no_switch=false
        case "$(command git config --get wt.nocd 2>/dev/null)" in
            true|all|yes|on|1) no_switch=true ;;
        esac
        local arg
        for arg in "$@"; do
            case "$arg" in
                --nocd|--nocd=true|--nocd=all) no_switch=true ;;
            esac
        done
        local result exit_code
        result=$(GIT_WT_SHELL_INTEGRATION=1 command git wt "$@")
        exit_code=$?
        local last_line="${result##*$'\n'}"
        if [[ "$last_line" == "#nocd "* ]]; then
            no_switch=true
            last_line="${last_line#"#nocd "}"
        fi
        if [[ $exit_code -eq 0 && -n "$last_line" && -d "$last_line" ]]; then
            # Print all lines except the last (intermediate paths)
            printf '%s\n' "$result" | sed '$d' | while IFS= read -r line; do
                [[ -n "$line" ]] && printf '%s\n' "$line"
            done
            if [[ "$no_switch" == "true" ]]; then
                printf '%s\n' "$last_line"
            else
                cd "$last_line"
            fi
        else
            [[ -n "$result" ]] && printf '%s\n' "$result"
            return $exit_code
        fi
    else
        command git "$@"
    fi
}
'''

BASH_COMPLETION = r'''
# git wt <branch> completion for bash
# Function name follows Git convention: _git_<subcommand>
_git_wt() {
    local cur="${COMP_WORDS[COMP_CWORD]}"
    local -a typed=("${COMP_WORDS[@]:2:COMP_CWORD-2}")
    __gitcomp_nl "$(command git-wt __complete "${typed[@]}" "$cur" 2>/dev/null | cut -f1)"
}
'''

ZSH_GIT_WRAPPER = BASH_GIT_WRAPPER

ZSH_COMPLETION = r'''
# git wt <branch> completion for zsh with descriptions
_git-wt() {
    local -a completions
    local comp desc
    while IFS=$'\t' read -r comp desc; do
        if [[ -n "$desc" ]]; then
            completions+=("${comp//:/\\:}:${desc}")
        else
            completions+=("${comp//:/\\:}")
        fi
    done < <(command git-wt __complete "${(@)words[2,CURRENT-1]}" "${words[CURRENT]}" 2>/dev/null)
    _describe 'git-wt' completions
}

# Hook into git completion for 'git wt'
_git-wt-wrapper() {
    if (( CURRENT == 2 )); then
        _git
    elif [[ "${words[2]}" == "wt" ]]; then
        shift words
        (( CURRENT-- ))
        _git-wt
    else
        _git
    fi
}

# Register completions if compdef is available
if (( $+functions[compdef] )); then
    compdef _git-wt git-wt
    compdef _git-wt-wrapper git
fi
'''

FISH_GIT_WRAPPER = r'''
# Override git command to cd after 'git wt <branch>'
function git --wraps git
    if test "$argv[1]" = "wt"
        set -l no_switch false
        switch (command git config --get wt.nocd 2>/dev/null)
            case true all yes on 1
                set no_switch true
        end
        for arg in $argv[2..-1]
            switch $arg
                case --nocd --nocd=true --nocd=all
                    set no_switch true
            end
        end
        set -l result (env GIT_WT_SHELL_INTEGRATION=1 git wt $argv[2..-1])
        set -l exit_code $status
        set -l last_line ""
        if test (count $result) -gt 0
            set last_line $result[-1]
        end
        if string match -q -- '#nocd *' "$last_line"
            set no_switch true
            set last_line (string replace -- '#nocd ' '' "$last_line")
        end
        if test $exit_code -eq 0 -a -n "$last_line" -a -d "$last_line"
            # Print all lines except the last (intermediate paths)
            for line in $result[1..-2]
                printf "%s\n" "$line"
            end
            if test "$no_switch" = "true"
                printf "%s\n" "$last_line"
            else
                cd "$last_line"
            end
        else
            for line in $result
                printf "%s\n" "$line"
            end
            return $exit_code
        end
    else
        command git $argv
    end
end
'''

FISH_COMPLETION = r'''
# git wt <branch> completion for fish
function __fish_git_wt_completions
    set -l cur (commandline -ct)
    set -l typed (commandline -opc)
    command git-wt __complete $typed[3..-1] "$cur" 2>/dev/null
end

function __fish_git_wt_needs_completion
    set -l cmd (commandline -opc)
    test (count $cmd) -ge 2 -a "$cmd[2]" = "wt"
end

complete -c git -n '__fish_git_wt_needs_completion' -f -a '(__fish_git_wt_completions)'
'''

POWERSHELL_GIT_WRAPPER = r'''
# Override git command to cd after 'git wt <branch>'
function Invoke-Git {
    if ($args.Count -gt 0 -and $args[0] -eq "wt") {
        $wtArgs = @($args | Select-Object -Skip 1)
        $noSwitch = ($wtArgs -contains "--nocd") -or ($wtArgs -contains "--nocd=true") -or ($wtArgs -contains "--nocd=all")
        # Check wt.nocd config
        if (-not $noSwitch) {
            $nocdConfig = & git.exe config --get wt.nocd 2>$null
            if (@("true", "all", "yes", "on", "1") -contains $nocdConfig) {
                $noSwitch = $true
            }
        }
        $env:GIT_WT_SHELL_INTEGRATION = "1"
        try {
            $result = @(& git.exe wt @wtArgs)
            $exitCode = $LASTEXITCODE
        } finally {
            Remove-Item Env:GIT_WT_SHELL_INTEGRATION -ErrorAction SilentlyContinue
        }
        $lines = @($result | Where-Object { $_ -ne "" })
        $lastLine = if ($lines.Count -gt 0) { $lines[-1] } else { "" }
        if ($lastLine.StartsWith("#nocd ")) {
            $noSwitch = $true
            $lastLine = $lastLine.Substring(6)
        }
        if ($exitCode -eq 0 -and $lastLine -and (Test-Path -LiteralPath $lastLine -PathType Container)) {
            # Print all lines except the last (intermediate paths)
            if ($lines.Count -gt 1) {
                $lines[0..($lines.Count-2)] | ForEach-Object { Write-Output $_ }
            }
            if ($noSwitch) {
                Write-Output $lastLine
            } else {
                Set-Location -LiteralPath $lastLine
            }
        } else {
            $result | ForEach-Object { Write-Output $_ }
            $global:LASTEXITCODE = $exitCode
        }
    } else {
        & git.exe @args
    }
}
Set-Alias -Name git -Value Invoke-Git -Option AllScope
'''

POWERSHELL_COMPLETION = r'''
# git wt <branch> completion for PowerShell
$scriptBlock = {
    param($wordToComplete, $commandAst, $cursorPosition)
    $tokens = @($commandAst.CommandElements | ForEach-Object { $_.ToString() })
    if ($tokens.Count -ge 2 -and $tokens[1] -eq "wt") {
        $typed = @($tokens | Select-Object -Skip 2)
        if ($wordToComplete -ne "" -and $typed.Count -gt 0) {
            $typed = @($typed | Select-Object -SkipLast 1)
        }
        $completions = & git-wt.exe __complete @typed $wordToComplete 2>$null
        $completions | ForEach-Object {
            $parts = $_ -split [char]9, 2
            $completion = $parts[0]
            $tooltip = if ($parts.Count -gt 1) { $parts[1] } else { $parts[0] }
            [System.Management.Automation.CompletionResult]::new($completion, $completion, 'ParameterValue', $tooltip)
        }
    }
}
Register-ArgumentCompleter -Native -CommandName git -ScriptBlock $scriptBlock
'''

SCRIPTS = {
    "bash": ("bash", BASH_GIT_WRAPPER, BASH_COMPLETION),
    "zsh": ("zsh", ZSH_GIT_WRAPPER, ZSH_COMPLETION),
    "fish": ("fish", FISH_GIT_WRAPPER, FISH_COMPLETION),
    "powershell": ("PowerShell", POWERSHELL_GIT_WRAPPER, POWERSHELL_COMPLETION),
}


def init_script(shell: str, nocd: bool = False) -> str:
    """Return the integration script for ``shell``.

    Args:
        shell: One of bash, zsh, fish, powershell
        nocd: Emit completion only, without the cd-ing git() wrapper

    Raises:
        UsageError: unsupported shell
    """
    if shell not in SCRIPTS:
        raise UsageError(
            f"unsupported shell: {shell} (supported: {', '.join(SUPPORTED_SHELLS)})"
        )
    label, wrapper, completion = SCRIPTS[shell]
    parts = [f"# git-wt shell hook for {label}\n"]
    if not nocd:
        parts.append(wrapper)
    parts.append(completion)
    return "".join(parts)
