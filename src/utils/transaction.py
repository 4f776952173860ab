"""Transaction boundary for multi-write ledger steps."""


class TransactionContext:
    """
    Commit a block of staged writes as one unit.

    A boutique line stages a stock decrement and a ledger entry; both
    reach the database together or not at all. On any exception the
    session is rolled back and the exception propagates to the caller.

    Usage:
        with TransactionContext(db_session):
            inventory_repo.decrement_stock(product, 2)
            session_repo.add(service_session)
    """

    def __init__(self, session):
        self._session = session

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self._session.rollback()
            return False
        self._session.commit()
        return False
