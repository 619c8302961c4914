from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import insert, select

from whereis.adapters.sqlalchemy import SqlAlchemyUnitOfWork, StartupError, tokens_table
from whereis.adapters.sqlalchemy.unit_of_work import configured_engine, is_started, shutdown

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_rollback_on_error(
    sqlite_engine: Engine,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    assert configured_engine() is sqlite_engine

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.session.execute(insert(tokens_table).values(id="key", user_id="user"))
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        rows = uow.session.execute(select(tokens_table)).all()
    assert rows == []
