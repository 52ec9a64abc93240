from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, TypeVar

from nauta.domain import (
    Category,
    Debt,
    FinancialSnapshot,
    Investment,
    SavingsGoal,
    is_emergency_goal,
)

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> "Maybe[U]":
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> "Maybe[U]":
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> "Maybe[U]":
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], "Either[E, U]"]) -> "Either[E, U]":
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self.value = value

    def bind(self, f: Callable[[T], "Either[E, U]"]) -> "Either[E, U]":
        return f(self.value)

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Right has no error")

    def __repr__(self) -> str:
        return f"Right({self.value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self.value == other.value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], "Either[E, U]"]) -> "Either[E, U]":
        return self

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def find_emergency_fund(goals: Iterable[SavingsGoal]) -> Maybe[SavingsGoal]:
    """The explicitly flagged goal wins; otherwise the first goal whose name
    mentions an emergency. Only one fund is ever considered."""
    goals = tuple(goals)
    for g in goals:
        if g.is_emergency_fund is True:
            return Some(g)
    for g in goals:
        if is_emergency_goal(g):
            return Some(g)
    return Nothing()


def find_investment(investments: Iterable[Investment], inv_id: str) -> Maybe[Investment]:
    for inv in investments:
        if inv.id == inv_id:
            return Some(inv)
    return Nothing()


def _category_has_name(c: Category) -> Either[dict, Category]:
    if not c.name:
        return Left({
            "error": "category_without_name",
            "message": f"Category {c.id} has no name",
            "category_id": c.id,
        })
    return Right(c)


def _category_amounts(c: Category) -> Either[dict, Category]:
    if c.budget < 0 or c.spent < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Category {c.name} has a negative budget or spent amount",
            "category_id": c.id,
            "budget": c.budget,
            "spent": c.spent,
        })
    return Right(c)


def validate_category(c: Category) -> Either[dict, Category]:
    return Right(c).bind(_category_has_name).bind(_category_amounts)


def _debt_balance(d: Debt) -> Either[dict, Debt]:
    if d.current_balance < 0:
        return Left({
            "error": "negative_balance",
            "message": f"Debt {d.name} has a negative balance",
            "debt_id": d.id,
            "balance": d.current_balance,
        })
    return Right(d)


def _debt_payment(d: Debt) -> Either[dict, Debt]:
    if d.monthly_payment < 0:
        return Left({
            "error": "negative_payment",
            "message": f"Debt {d.name} has a negative monthly payment",
            "debt_id": d.id,
            "monthly_payment": d.monthly_payment,
        })
    return Right(d)


def validate_debt(d: Debt) -> Either[dict, Debt]:
    return Right(d).bind(_debt_balance).bind(_debt_payment)


def _goal_amount(g: SavingsGoal) -> Either[dict, SavingsGoal]:
    if g.current_amount < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Savings goal {g.name} has a negative amount",
            "goal_id": g.id,
        })
    return Right(g)


def _goal_links(investments: tuple[Investment, ...]) -> Callable[[SavingsGoal], Either[dict, SavingsGoal]]:
    def check(g: SavingsGoal) -> Either[dict, SavingsGoal]:
        missing = [p for p in g.linked_platforms if not find_investment(investments, p).is_some()]
        if missing:
            return Left({
                "error": "platform_not_found",
                "message": f"Savings goal {g.name} links unknown platforms: {', '.join(missing)}",
                "goal_id": g.id,
                "missing": missing,
            })
        return Right(g)

    return check


def validate_goal(g: SavingsGoal, investments: tuple[Investment, ...] = ()) -> Either[dict, SavingsGoal]:
    return Right(g).bind(_goal_amount).bind(_goal_links(tuple(investments)))


def validate_snapshot(snapshot: FinancialSnapshot) -> list[str]:
    results = [validate_category(c) for c in snapshot.categories]
    results += [validate_debt(d) for d in snapshot.debts]
    results += [validate_goal(g, snapshot.investments) for g in snapshot.savings_goals]
    return [r.get_error()["message"] for r in results if not r.is_right()]
