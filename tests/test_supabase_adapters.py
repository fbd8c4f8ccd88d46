"""Tests for the Supabase meal repository."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from calorie_insights.adapters.supabase_meal_repository import SupabaseMealRepository
from calorie_insights.domain.meals import NewMeal


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "food_name": "Apple",
        "weight": 150,
        "calories": 95,
        "protein": 0.3,
        "carbs": 25.2,
        "fats": 0.2,
        "healthiness_rating": 8,
        "healthier_alternative": None,
        "image_url": None,
        "consumed": True,
        "created_at": "2024-06-05T12:30:00+00:00",
    }
    row.update(overrides)
    return row


def test_create_meal_inserts_row() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    user_id = uuid4()
    meals_table.queue("insert", [_row(user_id=str(user_id))])
    created_at = datetime(2024, 6, 5, 12, 30, tzinfo=UTC)

    record = SupabaseMealRepository(client).create_meal(
        user_id, NewMeal(food_name="Apple", calories=95, weight=150), created_at
    )

    assert record.user_id == user_id
    assert record.calories == 95
    assert record.healthiness_rating == 8
    assert isinstance(meals_table.last_payload, dict)
    assert meals_table.last_payload["user_id"] == str(user_id)
    assert meals_table.last_payload["created_at"] == created_at.isoformat()


def test_list_meals_filters_inclusive_range() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue(
        "select",
        [
            _row(),
            _row(
                protein=None,
                healthiness_rating=None,
                consumed=False,
                created_at="2024-06-06T08:00:00",
            ),
        ],
    )
    user_id = uuid4()
    start = datetime(2024, 6, 1, tzinfo=UTC)
    end = datetime(2024, 6, 7, 23, 59, 59, 999999, tzinfo=UTC)

    records = SupabaseMealRepository(client).list_meals(user_id, start, end)

    assert meals_table.last_filters == [
        ("eq", "user_id", str(user_id)),
        ("gte", "created_at", start.isoformat()),
        ("lte", "created_at", end.isoformat()),
    ]
    assert meals_table.last_order == ("created_at", False)
    assert records[0].protein == 0.3
    assert records[1].protein is None
    assert records[1].healthiness_rating is None
    assert records[1].consumed is False
    assert records[1].created_at == datetime(2024, 6, 6, 8, tzinfo=UTC)


def test_list_recent_meals_orders_newest_first() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue("select", [_row(food_name="Soup")])

    records = SupabaseMealRepository(client).list_recent_meals(uuid4(), 10)

    assert [record.food_name for record in records] == ["Soup"]
    assert meals_table.last_order == ("created_at", True)
    assert meals_table.last_limit == 10


def test_delete_meal_reports_whether_a_row_matched() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue("delete", [_row()])
    repository = SupabaseMealRepository(client)
    user_id = uuid4()
    meal_id = uuid4()

    assert repository.delete_meal(user_id, meal_id) is True
    assert ("eq", "id", str(meal_id)) in meals_table.last_filters
    assert ("eq", "user_id", str(user_id)) in meals_table.last_filters
    assert repository.delete_meal(user_id, meal_id) is False
