"""Tests for ConditionBuilder clause rendering."""

import pytest

from sqlagent.core.condition import ConditionBuilder
from sqlagent.dialect import DuckDBDialect


class TestPaging:
    """Test LIMIT rendering."""

    @pytest.mark.parametrize(
        "skip, take, expected",
        [
            (2, 5, " LIMIT 2,5"),
            (0, 5, " LIMIT 5"),
            (3, 0, " LIMIT 3,row_count"),
            (0, 0, ""),
        ],
    )
    def test_mysql_limits(self, skip, take, expected):
        assert ConditionBuilder(skip, take).render() == expected

    @pytest.mark.parametrize(
        "skip, take, expected",
        [
            (2, 5, " LIMIT 5 OFFSET 2"),
            (0, 5, " LIMIT 5"),
            (3, 0, " OFFSET 3"),
            (0, 0, ""),
        ],
    )
    def test_duckdb_limits(self, skip, take, expected):
        assert ConditionBuilder(skip, take, dialect=DuckDBDialect()).render() == expected

    def test_negative_paging_ignored(self):
        cond = ConditionBuilder(-1, -5)
        assert cond.skip_count == 0
        assert cond.take_count == 0
        assert cond.render() == ""

    def test_first(self):
        cond = ConditionBuilder(10, 20).first()
        assert cond.skip_count == 0
        assert cond.take_count == 1
        assert cond.render() == " LIMIT 1"

    def test_skip_and_take_chain(self):
        assert ConditionBuilder().skip(4).take(2).render() == " LIMIT 4,2"


class TestPredicates:
    """Test WHERE fragment accumulation."""

    def test_where_defaults_to_equals(self):
        assert ConditionBuilder().where("id", 7).render() == " WHERE `id`=7"

    def test_where_with_operator(self):
        cond = ConditionBuilder().where("age", ">", 18)
        assert cond.render() == " WHERE `age`>18"

    def test_push_is_where(self):
        assert ConditionBuilder().push("name", "Ann").render() == " WHERE `name`='Ann'"

    def test_where_escapes_value(self):
        assert ConditionBuilder().where("name", "O'Hara").render() == " WHERE `name`='O\\'Hara'"

    def test_where_none_renders_null(self):
        assert ConditionBuilder().where("deleted_at", " IS ", None).render() == " WHERE `deleted_at` IS null"

    def test_and_or_join_fragments(self):
        cond = ConditionBuilder().where("a", 1).and_().where("b", 2).or_().where("c", 3)
        assert cond.render() == " WHERE `a`=1 AND `b`=2 OR `c`=3"

    def test_leading_boolean_operator_ignored(self):
        cond = ConditionBuilder().and_().or_().where("a", 1)
        assert cond.fragments == ["`a`=1"]

    def test_in(self):
        cond = ConditionBuilder().in_("id", [1, 2, "x"])
        assert cond.render() == " WHERE `id` IN (1,2,'x')"

    def test_in_ignores_non_sequences(self):
        cond = ConditionBuilder().in_("id", "1,2")
        assert cond.fragments == []

    def test_like(self):
        assert ConditionBuilder().like("name", "a%").render() == " WHERE `name` LIKE 'a%'"

    def test_between_bounds_not_escaped(self):
        cond = ConditionBuilder().between("created", "'2024-01-01'", "'2024-12-31'")
        assert cond.render() == " WHERE `created` BETWEEN '2024-01-01' AND '2024-12-31'"

    def test_group(self):
        assert ConditionBuilder().group("kind", ["a", "b"]).fragments == ["`kind` GROUP BY a,b"]
        assert ConditionBuilder().group("kind", "a").fragments == ["`kind` GROUP BY a"]

    def test_raw_fragments(self):
        cond = ConditionBuilder().where("a", 1).sql("AND b IS NOT NULL").having("COUNT(*) > 1")
        assert cond.render() == " WHERE `a`=1 AND b IS NOT NULL COUNT(*) > 1"

    def test_duckdb_quoting(self):
        cond = ConditionBuilder(dialect=DuckDBDialect()).where("name", "O'Hara").take(1)
        assert cond.render() == " WHERE \"name\"='O''Hara' LIMIT 1"


class TestOrdering:
    """Test ORDER BY rendering."""

    def test_descending_flag(self):
        cond = ConditionBuilder().where("a", 1).order("name", True)
        assert cond.render() == " WHERE `a`=1 ORDER BY `name` DESC"

    def test_ascending_by_default(self):
        cond = ConditionBuilder().where("a", 1).order("name").order("id", False)
        assert cond.render() == " WHERE `a`=1 ORDER BY `name` ASC,`id` ASC"

    def test_direction_string(self):
        cond = ConditionBuilder().where("a", 1).order("name", "DESC")
        assert cond.orders == ["`name` DESC"]

    def test_preformatted_term_verbatim(self):
        cond = ConditionBuilder().where("a", 1).order("created_at desc")
        assert cond.orders == ["created_at desc"]

    def test_order_before_limit(self):
        cond = ConditionBuilder(0, 10).where("a", 1).order("id", True)
        assert cond.render() == " WHERE `a`=1 ORDER BY `id` DESC LIMIT 10"

    def test_order_without_predicates_not_rendered(self):
        cond = ConditionBuilder(0, 5).order("id", True)
        assert cond.render() == " LIMIT 5"

    def test_render_for_another_dialect(self):
        cond = ConditionBuilder(2, 5).where("name", "O'Hara").order("id", True)

        assert cond.render(DuckDBDialect()) == " WHERE \"name\"='O''Hara' ORDER BY \"id\" DESC LIMIT 5 OFFSET 2"
        assert cond.render() == " WHERE `name`='O\\'Hara' ORDER BY `id` DESC LIMIT 2,5"

    def test_str_matches_render(self):
        cond = ConditionBuilder().where("a", 1)
        assert str(cond) == cond.render()
