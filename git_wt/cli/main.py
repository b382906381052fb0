"""Entry point for the git-wt command."""

import signal
import sys
import traceback
from typing import List, Optional

from git_wt.cli.args import build_parser, config_overrides, parse_args
from git_wt.constants import (
    COMPLETE_COMMAND,
    EXIT_CANCELLED,
    EXIT_ERROR,
    EXIT_OK,
    EXIT_USAGE,
)
from git_wt.core import GitWt, resolve_action
from git_wt.exceptions import GitWtError, OperationCancelledError, UsageError
from git_wt.logging_config import get_logger, setup_logging
from git_wt.models.action import CompleteAction
from git_wt.services.output_service import OutputWriter
from git_wt.utils.cancel import CancelToken

logger = get_logger(__name__)


def _install_interrupt_handler(token: CancelToken):
    """Route SIGINT into the cancel token; returns the previous handler."""

    def _signal_handler(signum, frame):
        token.cancel()

    try:
        return signal.signal(signal.SIGINT, _signal_handler)
    except ValueError:
        # Not running in the main thread
        return None


def _run_completion(argv: List[str], output: OutputWriter, token: CancelToken) -> int:
    """Handle ``git-wt __complete [<word>...] <prefix>``."""
    words = argv[1:]
    prefix = words[-1] if words else ""
    action = CompleteAction(prefix=prefix, words=words[:-1])
    try:
        GitWt(token=token, output=output).run(action)
    except GitWtError as e:
        logger.debug(f"Completion failed: {e}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Run git-wt and return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]

    output = OutputWriter()
    token = CancelToken()

    if argv and argv[0] == COMPLETE_COMMAND:
        return _run_completion(argv, output, token)

    try:
        args = parse_args(argv)
    except SystemExit as e:
        # argparse exits for --help / --version (0) and usage errors (2)
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    setup_logging(verbose=args.verbose, debug=args.debug)
    previous_handler = _install_interrupt_handler(token)

    try:
        action = resolve_action(args)
        GitWt(overrides=config_overrides(args), token=token, output=output).run(action)
        return EXIT_OK
    except OperationCancelledError:
        output.error("interrupted")
        return EXIT_CANCELLED
    except UsageError as e:
        output.info(build_parser().format_usage().rstrip())
        output.error(str(e))
        return EXIT_USAGE
    except GitWtError as e:
        output.error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        output.error("interrupted")
        return EXIT_CANCELLED
    except Exception as e:
        output.error(f"unexpected error: {e}")
        if args.debug:
            traceback.print_exc()
        return EXIT_ERROR
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)


if __name__ == "__main__":
    sys.exit(main())
