"""Helps you jot notes in a git-backed directory of plain files.

Finding, listing and editing notes is delegated to programs you configure; jot
runs them and keeps the directory synchronized with its git remote.

If you installed via ``pip``, run ``jot help`` to get help.
Or, run ``python3 -m jot help``.

To use the Python API, look at :class:`jot.api.Jot`
"""
