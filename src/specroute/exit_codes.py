"""Exit statuses of the ``specroute`` command.

Scripts can branch on these instead of scraping stderr::

    $ specroute match get /v1/unknown --spec petstore.json
    $ echo $?
    4
"""

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2  # bad arguments, or no document to work on
EXIT_NO_ROUTE = 4  # ``match`` found no operation for the request
EXIT_BAD_DOCUMENT = 7  # the document could not be read or parsed
