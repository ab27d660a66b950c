"""Command-line interface for jot."""


import argparse
import logging
import os
import sys
from jot.api import Jot
from jot.conf import DEFAULT_CONF_PATH, CONF_PATH_ENV_VARNAME
from jot.errors import Error, OperationInterrupted, SyncStageFailure
from jot.models import SyncOutcome, Synced, UpToDate

DESCRIPTION = """Helps you jot notes.

Finding, listing and editing notes is delegated to command invocations you configure. An invocation can be
anything, from /bin/ls to fzf to a custom Python script; only its stdout is used, and it is considered to have
failed only if it exits with a non-zero status.

Invocations are executed by passing them to your $SHELL, so they can use shell syntax such as pipes and
environment variable substitution (jot passes its environment down to its child processes). If your shell does
not use -c to execute a command, set --shell-cmd-flag.

stdin and stderr are inherited by invocations, to support programs like fzf that draw their UI there. If your
invocation reports errors on stderr and you want them in jot's error messages, set --capture-std.

$EDITOR inherits stdin and stdout; its stderr is captured. git inherits all standard streams.
"""


def _print_sync_outcome(outcome: SyncOutcome) -> None:
    if isinstance(outcome, Synced):
        if outcome.commit_message:
            print(f'Synced: {outcome.commit_message}')
        else:
            print('Synced.')
    elif isinstance(outcome, UpToDate):
        print('Already up to date.')


def _new(args, jot: Jot) -> int:
    outcome = jot.new(args.path)
    _print_sync_outcome(outcome)
    return 0


def _edit(args, jot: Jot) -> int:
    outcome = jot.edit(args.path)
    _print_sync_outcome(outcome)
    return 0


def _list(args, jot: Jot) -> int:
    listing = jot.list(args.path)
    sys.stdout.flush()
    sys.stdout.buffer.write(os.fsencode(listing))
    sys.stdout.buffer.flush()
    return 0


def _sync(args, jot: Jot) -> int:
    _print_sync_outcome(jot.sync())
    return 0


def _add_switch(parser: argparse.ArgumentParser, short: str, name: str, help: str, negative_short: str = None) -> None:
    dest = name.replace('-', '_')
    parser.add_argument(short, f'--{name}', dest=dest, action='store_const', const=True, help=help)
    negative = [negative_short] if negative_short else []
    parser.add_argument(*negative, f'--no-{name}', dest=dest, action='store_const', const=False,
                        help=f'Opposite of --{name}.')


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='jot', description=DESCRIPTION,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.set_defaults(func=_edit, command='edit', path=None)

    parser.add_argument('--config', help=f'YAML file to read options from. Command-line options take precedence. '
                                         f'Defaults to ${CONF_PATH_ENV_VARNAME}, or {DEFAULT_CONF_PATH} if it exists.')
    parser.add_argument('-b', '--base-dir',
                        help='The base directory under which all notes must reside. This must be the root of a git '
                             'repository.')
    parser.add_argument('-f', '--finder', help='A command invocation that prints a single filepath to stdout.')
    parser.add_argument('-l', '--lister',
                        help='A command invocation that, given a path (relative to base-dir) as a trailing argument, '
                             'prints a listing to stdout.')
    parser.add_argument('-s', '--shell-cmd-flag',
                        help='Which flag to pass to $SHELL to make it execute a command line. Default: -c')
    parser.add_argument('-r', '--git-remote-name', help='Remote to pull from and push to. Default: origin')
    parser.add_argument('-u', '--git-upstream-branch', help='Branch to pull from and push to. Default: main')
    _add_switch(parser, '-c', 'capture-std',
                'Capture stdin and stderr of finder and lister invocations instead of inheriting them. '
                'Captured stderr is shown when an invocation fails. Default: off')
    _add_switch(parser, '-e', 'edit-syncs', 'Sync after editing a note. Default: on', negative_short='-E')
    _add_switch(parser, '-m', 'git-custom-commit-msg',
                'Let git ask for a commit message when syncing, instead of using the current time. Default: off')
    _add_switch(parser, '-q', 'quiet-on-ctrl-c',
                'Print nothing when an invocation is interrupted with Ctrl+C. Default: off')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log what jot is doing to stderr. Repeat for more detail.')

    subs = parser.add_subparsers(title='Commands', metavar='command')

    p_new = subs.add_parser('new', help='Create an empty note at the given path (unless it exists) and open it in '
                                        '$EDITOR. Relative paths are relative to base-dir.')
    p_new.add_argument('path')
    p_new.set_defaults(func=_new, command='new')

    p_edit = subs.add_parser('edit', help='Open a note in $EDITOR. If no path is given, the finder chooses one. '
                                          'This is the default command.')
    p_edit.add_argument('path', nargs='?')
    p_edit.set_defaults(func=_edit, command='edit')

    p_list = subs.add_parser('list', help='Print the output of the lister for base-dir or a path under it.')
    p_list.add_argument('path', nargs='?', help='Subtree from which to begin the listing.')
    p_list.set_defaults(func=_list, command='list')

    p_sync = subs.add_parser(
        'sync',
        help='Synchronize notes: git pull, stage all changes, commit and push. Stops at the first step that '
             'fails, such as a pull with a merge conflict.')
    p_sync.set_defaults(func=_sync, command='sync')

    p_help = subs.add_parser('help', help='Show help for jot or for one of its commands.')
    p_help.add_argument('topic', nargs='?', choices=sorted(subs.choices), metavar='command')
    p_help.set_defaults(func=None, command='help', help_parsers=dict(subs.choices))

    return parser


def _help(parser: argparse.ArgumentParser, parsers: dict, topic: str = None) -> int:
    if topic:
        parsers[topic].print_help()
    else:
        parser.print_help()
    return 0


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format='jot: %(levelname)s: %(name)s: %(message)s')


def _is_interruption(error: Error) -> bool:
    return isinstance(error, OperationInterrupted) or (isinstance(error, SyncStageFailure) and error.interrupted)


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    _configure_logging(args.verbose)
    if args.command == 'help':
        return _help(parser, args.help_parsers, args.topic)

    quiet_on_ctrl_c = bool(args.quiet_on_ctrl_c)
    try:
        jot = Jot.for_user(
            args.config,
            base_dir=args.base_dir,
            finder=args.finder,
            lister=args.lister,
            shell_cmd_flag=args.shell_cmd_flag,
            git_remote_name=args.git_remote_name,
            git_upstream_branch=args.git_upstream_branch,
            capture_std=args.capture_std,
            edit_syncs=args.edit_syncs,
            git_custom_commit_msg=args.git_custom_commit_msg,
            quiet_on_ctrl_c=args.quiet_on_ctrl_c,
        )
        quiet_on_ctrl_c = jot.conf.quiet_on_ctrl_c
        jot.conf.validate(need_finder=args.command == 'edit' and not args.path, need_lister=args.command == 'list')
        return args.func(args, jot)
    except Error as ex:
        if not (quiet_on_ctrl_c and _is_interruption(ex)):
            print(f'jot: {ex}', file=sys.stderr)
        return 1
