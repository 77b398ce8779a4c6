"""
Unit of work tests.

`atomic` commits on success and rolls back on any failure; database
errors surface as PersistenceError.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from invoicer.core.database import atomic
from invoicer.core.exceptions import AuthorizationError, PersistenceError


class TestAtomic:
    """Commit and rollback behaviour."""

    async def test_commit_on_success(self, mock_db):
        async with atomic(mock_db, "test"):
            mock_db.add(object())

        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()

    async def test_database_error_rolled_back(self, mock_db):
        """Test that a database error becomes PersistenceError after rollback."""
        with pytest.raises(PersistenceError) as exc_info:
            async with atomic(mock_db, "test"):
                raise OperationalError("INSERT", {}, Exception("connection lost"))

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_commit_failure_rolled_back(self, mock_db):
        mock_db.commit.side_effect = IntegrityError("COMMIT", {}, Exception("constraint"))

        with pytest.raises(PersistenceError):
            async with atomic(mock_db, "test"):
                pass

        mock_db.rollback.assert_awaited_once()

    async def test_domain_error_propagates(self, mock_db):
        """Test that domain errors roll back and keep their type."""
        with pytest.raises(AuthorizationError):
            async with atomic(mock_db, "test"):
                raise AuthorizationError()

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
