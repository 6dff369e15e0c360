"""Shared fixtures: factories, in-memory repository and session, identities, API client."""

import uuid
from datetime import UTC, date, datetime, time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import (
    BinaryExpression,
    BindParameter,
    BooleanClauseList,
    ColumnClause,
    False_,
    Grouping,
    Null,
    True_,
)
from sqlalchemy.sql.selectable import Subquery

from app.api.deps import get_booking_lifecycle_service, get_current_user, get_db, get_now
from app.core.permissions import AuthenticatedUser, UserRole
from app.main import app
from app.models.booking import Booking
from app.models.order import MenuItem, Order
from app.models.workspace import Workspace
from app.repositories.base import BookingRepository
from app.services.booking_lifecycle_service import BookingLifecycleService

BOOKING_DATE = date(2026, 3, 10)
START = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
END = datetime(2026, 3, 10, 11, 0, tzinfo=UTC)


def make_workspace(name: str = "Hot Desk - Main Floor", **overrides) -> Workspace:
    fields = dict(
        id=uuid.uuid4(),
        name=name,
        type="hot-desk",
        resource_category="desk",
        capacity=1,
        base_price_hourly=1000,
        min_duration=Decimal("1"),
        max_duration=Decimal("12"),
        available=True,
    )
    fields.update(overrides)
    return Workspace(**fields)


def make_booking(user_id: uuid.UUID, **overrides) -> Booking:
    """Two-hour booking, 09:00-11:00, $20.00 subtotal + $0.88 fee."""
    fields = dict(
        id=uuid.uuid4(),
        confirmation_code=uuid.uuid4().hex[:8].upper(),
        user_id=user_id,
        workspace_id=None,
        booking_type="hourly-desk",
        booking_date=BOOKING_DATE,
        start_time=time(9, 0),
        end_time=time(11, 0),
        duration_hours=Decimal("2.00"),
        attendees=1,
        subtotal=2000,
        discount_amount=0,
        nft_discount_applied=False,
        processing_fee=88,
        total_price=2088,
        status="confirmed",
        payment_status="pending",
        payment_intent_id=None,
        special_requests=None,
        check_in_time=None,
        check_out_time=None,
        actual_duration_hours=None,
        final_charge=None,
        cancelled_at=None,
        created_at=datetime(2026, 3, 1, tzinfo=UTC),
    )
    workspace = overrides.pop("workspace", None) or make_workspace()
    fields.update(overrides)
    booking = Booking(**fields)
    booking.workspace = workspace
    booking.workspace_id = workspace.id
    return booking


def make_menu_item(title: str = "Latte", price: int = 450, **overrides) -> MenuItem:
    fields = dict(
        id=uuid.uuid4(),
        title=title,
        description=None,
        price=price,
        category="coffee",
        dietary_tags=None,
        orderable=True,
        featured=False,
    )
    fields.update(overrides)
    return MenuItem(**fields)


class FakeBookingRepository(BookingRepository):
    """In-memory repository with the same conditional-update semantics."""

    def __init__(self, *bookings: Booking):
        self.bookings = {b.id: b for b in bookings}
        self.lose_races = False
        self.check_in_calls = 0
        self.check_out_calls = 0

    def add(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = booking
        return booking

    async def get_booking_by_id(self, booking_id):
        return self.bookings.get(booking_id)

    async def get_active_booking(self, user_id):
        for booking in self.bookings.values():
            if (
                booking.user_id == user_id
                and booking.status == "checked_in"
                and booking.check_in_time is not None
                and booking.check_out_time is None
            ):
                return booking
        return None

    async def check_in_booking(self, booking_id, timestamp):
        self.check_in_calls += 1
        booking = self.bookings.get(booking_id)
        if self.lose_races or booking is None:
            return None
        if booking.check_in_time is not None or booking.status not in ("pending", "confirmed"):
            return None
        booking.check_in_time = timestamp
        booking.status = "checked_in"
        return booking

    async def check_out_booking(self, booking_id, timestamp, actual_duration_hours, final_charge):
        self.check_out_calls += 1
        booking = self.bookings.get(booking_id)
        if self.lose_races or booking is None:
            return None
        if booking.check_in_time is None or booking.check_out_time is not None:
            return None
        booking.check_out_time = timestamp
        booking.actual_duration_hours = actual_duration_hours
        booking.final_charge = final_charge
        booking.status = "completed"
        return booking


class FakeResult:
    def __init__(self, rows):
        self.rows = list(rows)

    def scalar_one_or_none(self):
        assert len(self.rows) <= 1, "query matched more than one row"
        return self.rows[0] if self.rows else None

    def scalar_one(self):
        assert len(self.rows) == 1, f"expected exactly one row, got {len(self.rows)}"
        return self.rows[0]

    def scalar(self):
        return self.rows[0] if self.rows else None

    def scalars(self):
        return self

    def all(self):
        return list(self.rows)


class FakeSession:
    """In-memory AsyncSession stand-in for route tests.

    Evaluates the WHERE clause of ``select()`` statements against stored
    objects: comparisons, IN, IS [NOT] NULL and AND of those. Ordering
    and pagination are ignored. ``count()`` over a subquery is supported.
    """

    COMPARISONS = {
        operators.eq: lambda a, b: a == b,
        operators.ne: lambda a, b: a != b,
        operators.lt: lambda a, b: a is not None and a < b,
        operators.le: lambda a, b: a is not None and a <= b,
        operators.gt: lambda a, b: a is not None and a > b,
        operators.ge: lambda a, b: a is not None and a >= b,
        operators.in_op: lambda a, b: a in b,
        operators.not_in_op: lambda a, b: a not in b,
        operators.is_: lambda a, b: a is b,
        operators.is_not: lambda a, b: a is not b,
    }

    def __init__(self, tables: dict | None = None):
        self.tables = tables or {}
        self.flushes = 0

    def add(self, obj) -> None:
        if obj.id is None:
            obj.id = uuid.uuid4()
        if isinstance(obj, Order):
            for item in obj.items:
                item.id = item.id or uuid.uuid4()
                item.order_id = obj.id
        self.tables.setdefault(type(obj), {})[obj.id] = obj

    def add_all(self, objs) -> None:
        for obj in objs:
            self.add(obj)

    def rows(self, model) -> list:
        return list(self.tables.get(model, {}).values())

    async def flush(self) -> None:
        self.flushes += 1

    async def refresh(self, obj) -> None:
        pass

    async def execute(self, stmt) -> FakeResult:
        description = stmt.column_descriptions[0]
        entity = description.get("entity")
        if entity is None:
            # select(func.count()).select_from(query.subquery())
            subquery = stmt.get_final_froms()[0]
            assert isinstance(subquery, Subquery)
            return FakeResult([len(self._select(subquery.element))])

        rows = self._select(stmt)
        if description["expr"] is not entity:
            rows = [getattr(row, description["name"]) for row in rows]
        return FakeResult(rows)

    def _select(self, stmt) -> list:
        entity = stmt.column_descriptions[0]["entity"]
        where = stmt.whereclause
        return [row for row in self.rows(entity) if where is None or self._matches(where, row)]

    def _matches(self, clause, row) -> bool:
        if isinstance(clause, BooleanClauseList):
            results = [self._matches(c, row) for c in clause.clauses]
            return all(results) if clause.operator is operators.and_ else any(results)
        if isinstance(clause, Grouping):
            return self._matches(clause.element, row)
        if isinstance(clause, BinaryExpression):
            compare = self.COMPARISONS[clause.operator]
            return compare(self._value(clause.left, row), self._value(clause.right, row))
        raise NotImplementedError(f"Unsupported clause: {clause!r}")

    def _value(self, element, row):
        if isinstance(element, BindParameter):
            return element.effective_value
        if isinstance(element, Null):
            return None
        if isinstance(element, True_):
            return True
        if isinstance(element, False_):
            return False
        if isinstance(element, Grouping):
            return self._value(element.element, row)
        if isinstance(element, ColumnClause):
            return getattr(row, element.key)
        raise NotImplementedError(f"Unsupported expression: {element!r}")


@pytest.fixture
def user() -> AuthenticatedUser:
    return AuthenticatedUser(id=uuid.uuid4())


@pytest.fixture
def other_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=uuid.uuid4())


@pytest.fixture
def staff_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=uuid.uuid4(), role=UserRole.STAFF)


@pytest.fixture
def booking(user) -> Booking:
    return make_booking(user.id)


@pytest.fixture
def repository(booking) -> FakeBookingRepository:
    return FakeBookingRepository(booking)


@pytest.fixture
def session(repository) -> FakeSession:
    """Session whose bookings are the repository's, so route queries see lifecycle writes."""
    session = FakeSession({Booking: repository.bookings})
    for booking in repository.bookings.values():
        session.add(booking.workspace)
    return session


@pytest.fixture
def clock():
    return {"now": START}


@pytest.fixture
def client(user, repository, session, clock):
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_now] = lambda: clock["now"]
    app.dependency_overrides[get_booking_lifecycle_service] = lambda: BookingLifecycleService(repository)
    yield TestClient(app)
    app.dependency_overrides.clear()


def act_as(user: AuthenticatedUser) -> None:
    """Switch the identity the API client is authenticated as."""
    app.dependency_overrides[get_current_user] = lambda: user
