"""Configuration for jot, built from an optional YAML file and command-line flags.

The most important class is :class:`JotConf`.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
import logging
import os
import os.path
from typing import Optional
import yaml
from jot.errors import ConfError

logger = logging.getLogger(__name__)

DEFAULT_CONF_PATH = os.path.join('~', '.jot.yml')
"""Where :meth:`JotConf.for_user` looks for a config file when none is specified."""

CONF_PATH_ENV_VARNAME = 'JOT_CONFIG'


@dataclass(frozen=True)
class JotConf:
    """Everything jot needs to know to run, fixed for the lifetime of the process.

    Usually built with :meth:`for_user`. Instances are immutable; use :func:`dataclasses.replace` to derive
    a modified copy.

    Example ``~/.jot.yml``:

    .. code-block:: yaml

       base-dir: ~/notes
       finder: fd --type f | fzf
       lister: tree
       quiet-on-ctrl-c: true
    """

    base_dir: str
    """The directory under which all notes must reside. It must be the root of a git working tree."""

    finder: Optional[str] = None
    """A command invocation that prints a single filepath to stdout upon completion.

    Required for ``edit`` when no path is given.
    """

    lister: Optional[str] = None
    """A command invocation that, given a path relative to :attr:`base_dir` as a trailing argument, prints a
    listing to stdout.

    Required for ``list``.
    """

    shell_cmd_flag: str = '-c'
    """The flag that makes ``$SHELL`` execute its next argument as a command line. bash and zsh use ``-c``."""

    git_remote_name: str = 'origin'

    git_upstream_branch: str = 'main'

    capture_std: bool = False
    """If True, stdin and stderr of finder and lister invocations are captured instead of inherited.

    Captured stderr is included in the error message when the invocation fails. Leave this False for
    interactive programs like fzf, which need the terminal.
    """

    edit_syncs: bool = True
    """Whether ``edit`` and ``new`` run a sync after the editor exits."""

    git_custom_commit_msg: bool = False
    """If True, sync opens git's interactive commit flow instead of using a timestamp as the message."""

    quiet_on_ctrl_c: bool = False
    """If True, nothing is printed when an invocation is interrupted with Ctrl+C. jot still exits non-zero."""

    @classmethod
    def for_user(cls, path: str = None, **overrides) -> JotConf:
        """Loads the user's config file and applies overrides, typically from command-line flags.

        The file is ``path`` if given, else ``$JOT_CONFIG``, else ``~/.jot.yml``. Only the default file may be
        missing. Overrides whose value is None are ignored, so unset flags do not clobber the file.

        Raises :exc:`jot.errors.ConfError` if the file is invalid or ``base_dir`` ends up unset.
        """
        explicit = path or os.environ.get(CONF_PATH_ENV_VARNAME)
        values = load_conf_file(os.path.expanduser(explicit or DEFAULT_CONF_PATH), required=bool(explicit))
        values.update({k: v for k, v in overrides.items() if v is not None})
        if not values.get('base_dir'):
            raise ConfError('base_dir must be set, either with --base-dir or in your config file')
        return cls(**values).standardize()

    def standardize(self) -> JotConf:
        return replace(self, base_dir=os.path.realpath(os.path.expanduser(self.base_dir)))

    def validate(self, *, need_finder: bool = False, need_lister: bool = False) -> None:
        """Raises :exc:`jot.errors.ConfError` if this configuration cannot be used for the requested work.

        Whether :attr:`base_dir` is really a git repository with the configured remote is not checked here;
        the first git command that fails will report it.
        """
        if not os.path.isdir(self.base_dir):
            raise ConfError(f'base_dir does not exist or is not a directory: {self.base_dir}')
        if need_finder and not self.finder:
            raise ConfError('a finder invocation is required, set --finder or "finder" in your config file')
        if need_lister and not self.lister:
            raise ConfError('a lister invocation is required, set --lister or "lister" in your config file')


def load_conf_file(path: str, required: bool = False) -> dict:
    """Reads a YAML config file and returns its values keyed by :class:`JotConf` field name.

    Keys may use dashes instead of underscores, matching the command-line flags.
    """
    if not os.path.exists(path):
        if required:
            raise ConfError(f'config file does not exist: {path}')
        return {}
    logger.debug('loading config file %s', path)
    try:
        with open(path, 'r') as file:
            doc = yaml.safe_load(file)
    except yaml.YAMLError as ex:
        raise ConfError(f'invalid YAML in config file {path}: {ex}') from ex
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ConfError(f'config file must contain a mapping of option names to values: {path}')

    types = {f.name: f.type for f in fields(JotConf)}
    values = {}
    for key, value in doc.items():
        name = str(key).replace('-', '_')
        if name not in types:
            raise ConfError(f'unknown option "{key}" in config file {path}')
        # annotations are strings because of the __future__ import
        if types[name] == 'bool' and not isinstance(value, bool):
            raise ConfError(f'option "{key}" must be true or false in config file {path}')
        if types[name] != 'bool' and value is not None:
            value = str(value)
        values[name] = value
    return values
