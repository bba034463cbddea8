"""SQLAlchemy implementation of the Unit of Work port."""

from sqlalchemy.orm import Session

from progression.application.common.unit_of_work import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Wraps the request-scoped session.

    Repositories only flush; this is the one place that commits.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
