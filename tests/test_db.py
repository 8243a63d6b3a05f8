from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

import ragbot.util.db as db_module


@pytest.fixture(autouse=True)
def _reset_engine() -> Iterator[None]:
    db_module._engine = None
    db_module._session_factory = None
    yield
    db_module._engine = None
    db_module._session_factory = None


class TestConfigureEngine:
    def test_configure_engine_sets_module_engine(self) -> None:
        engine = db_module.configure_engine("sqlite:///:memory:")
        assert db_module.get_engine() is engine

    def test_reconfigure_disposes_previous_engine(self) -> None:
        previous = MagicMock()
        db_module._engine = previous

        db_module.configure_engine("sqlite:///:memory:")

        previous.dispose.assert_called_once()
        assert db_module.get_engine() is not previous


class TestGetEngine:
    def test_raises_before_configure(self) -> None:
        with pytest.raises(RuntimeError, match="Database engine not configured"):
            db_module.get_engine()


class TestGetSession:
    def test_get_session_yields_session(self) -> None:
        db_module.configure_engine("sqlite:///:memory:")
        with db_module.get_session() as session:
            result = session.execute(db_module.text("SELECT 1"))
            assert result.scalar() == 1

    def test_get_session_raises_without_engine(self) -> None:
        with pytest.raises(RuntimeError), db_module.get_session():
            pass


class TestInitDb:
    def test_creates_extension_on_postgres(self) -> None:
        engine = MagicMock()
        engine.dialect.name = "postgresql"
        conn = engine.begin.return_value.__enter__.return_value
        db_module._engine = engine

        with patch("ragbot.vectorstore.models.Base.metadata.create_all") as mock_create_all:
            db_module.init_db()

        statement = conn.execute.call_args[0][0]
        assert "CREATE EXTENSION IF NOT EXISTS vector" in str(statement)
        mock_create_all.assert_called_once_with(engine)

    def test_skips_extension_on_other_dialects(self) -> None:
        engine = MagicMock()
        engine.dialect.name = "sqlite"
        db_module._engine = engine

        with patch("ragbot.vectorstore.models.Base.metadata.create_all") as mock_create_all:
            db_module.init_db()

        engine.begin.assert_not_called()
        mock_create_all.assert_called_once_with(engine)

    def test_requires_engine(self) -> None:
        with pytest.raises(RuntimeError):
            db_module.init_db()


class TestDisposeEngine:
    def test_dispose_resets_engine(self) -> None:
        engine = MagicMock()
        db_module._engine = engine

        db_module.dispose_engine()

        engine.dispose.assert_called_once()
        with pytest.raises(RuntimeError):
            db_module.get_engine()
        with pytest.raises(RuntimeError), db_module.get_session():
            pass

    def test_dispose_without_engine_is_noop(self) -> None:
        db_module.dispose_engine()
        assert db_module._engine is None
