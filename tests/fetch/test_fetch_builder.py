"""Tests for ``quarry.core.fetch.builder``."""

from __future__ import annotations

import pytest

from quarry.core.fetch import (
    CompoundPredicate,
    FetchRequest,
    FetchRequestBuilder,
    LogicalOperator,
    SimplePredicate,
    SortClause,
    SortDirection,
)


class TestAccumulation:
    def test_new_builder_is_empty(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor")
        assert builder.table == "actor"
        assert builder.predicates == []
        assert builder.sort == []
        assert builder.limit_value is None
        assert builder.offset_value is None

    def test_mutators_return_same_builder(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor")
        assert builder.where("a = ?", [1]) is builder
        assert builder.where_and(("b = ?", 2)) is builder
        assert builder.where_or(("c = ?", 3)) is builder
        assert builder.order_by("a") is builder
        assert builder.limit(5) is builder
        assert builder.offset(5) is builder
        assert builder.page(2, 5) is builder

    def test_where_appends_simple_predicate(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("name = ?", ["Mark"])
        assert builder.predicates == [SimplePredicate(text="name = ?", params=("Mark",))]

    def test_where_single_string_binds_one_value(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("name = ?", "Mark")
        assert builder.predicates[0].params == ("Mark",)

    def test_where_single_bytes_binds_one_value(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("tag = ?", b"\x01\x02")
        assert builder.predicates[0].params == (b"\x01\x02",)

    def test_where_without_params(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("name IS NULL")
        assert builder.predicates[0].params == ()

    def test_where_or_builds_one_group(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where_or(
            ("role = ?", "R2-D2"),
            ("role IN(?, ?)", "C3PO", "Rey"),
            ("name IS NULL",),
        )
        assert len(builder.predicates) == 1
        group = builder.predicates[0]
        assert isinstance(group, CompoundPredicate)
        assert group.operator is LogicalOperator.OR
        assert [child.params for child in group.predicates] == [
            ("R2-D2",),
            ("C3PO", "Rey"),
            (),
        ]

    def test_where_and_builds_and_group(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where_and(("a = ?", 1), ("b = ?", 2))
        assert builder.predicates[0].operator is LogicalOperator.AND

    def test_order_by_keeps_call_order(self, recorder):
        builder = (
            FetchRequestBuilder(recorder, "actor")
            .order_by("surname", "desc")
            .order_by("name")
        )
        assert builder.sort == [
            SortClause(column="surname", direction=SortDirection.DESC),
            SortClause(column="name", direction=SortDirection.ASC),
        ]

    @pytest.mark.parametrize(
        "number,size,offset",
        [(1, 5, 0), (2, 5, 5), (3, 10, 20), (0, 5, 0)],
    )
    def test_page(self, recorder, number, size, offset):
        builder = FetchRequestBuilder(recorder, "actor").page(number, size)
        assert builder.limit_value == size
        assert builder.offset_value == offset

    def test_repr(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("a = ?", [1])
        assert repr(builder) == "FetchRequestBuilder(table='actor', predicates=1, sort=0)"


class TestBuild:
    def test_build_matches_literal_request(self, recorder):
        built = (
            FetchRequestBuilder(recorder, "actor")
            .where("name <> ?", ["Mark"])
            .where_or(("role = ?", "R2-D2"), ("role = ?", "C3PO"))
            .order_by("surname")
            .limit(10)
            .build()
        )
        literal = FetchRequest(
            table="actor",
            predicates=[
                SimplePredicate(text="name <> ?", params=("Mark",)),
                CompoundPredicate(
                    operator="OR",
                    predicates=[
                        SimplePredicate(text="role = ?", params=("R2-D2",)),
                        SimplePredicate(text="role = ?", params=("C3PO",)),
                    ],
                ),
            ],
            sort=[SortClause(column="surname")],
            limit=10,
        )
        assert built == literal

    def test_build_snapshots_state(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").where("a = ?", [1])
        first = builder.build()
        builder.where("b = ?", [2])
        assert len(first.predicates) == 1
        assert len(builder.build().predicates) == 2

    def test_malformed_fragment_is_accepted_while_building(self, recorder):
        request = FetchRequestBuilder(recorder, "actor").where("this is not sql", [1, 2]).build()
        assert request.predicates[0].text == "this is not sql"


class TestFetch:
    @pytest.mark.asyncio
    async def test_fetch_executes_compiled_statement(self, recorder):
        await (
            FetchRequestBuilder(recorder, "actor")
            .where("name <> ?", ["Mark"])
            .where_or(("role = ?", "R2-D2"), ("role = ?", "C3PO"))
            .order_by("surname", "DESC")
            .fetch()
        )
        assert recorder.calls == [
            (
                "SELECT * FROM actor\n"
                "WHERE (name <> ?) AND ((role = ?) OR (role = ?))\n"
                "ORDER BY surname DESC",
                ("Mark", "R2-D2", "C3PO"),
            )
        ]

    @pytest.mark.asyncio
    async def test_fetch_returns_executor_rows(self, recorder):
        recorder.rows = [{"name": "Kenny"}]
        rows = await FetchRequestBuilder(recorder, "actor").fetch()
        assert rows == [{"name": "Kenny"}]

    @pytest.mark.asyncio
    async def test_fetch_twice_runs_twice(self, recorder):
        builder = FetchRequestBuilder(recorder, "actor").page(2, 5)
        await builder.fetch()
        await builder.fetch()
        assert len(recorder.calls) == 2
        assert recorder.calls[0] == recorder.calls[1]
        assert recorder.calls[0][0].endswith("LIMIT 5\nOFFSET 5")
