"""Sub-commands of the ``specroute`` CLI.

:mod:`~specroute.commands.routes` holds ``routes``, ``match`` and
``resolve``, plain callbacks registered on the root app in
:mod:`specroute.app`.
"""
