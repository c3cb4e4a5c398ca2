class DatastoreError(Exception):
    """The backing datastore could not complete the operation.

    Store state is left unchanged; callers may retry.
    """
