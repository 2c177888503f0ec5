"""Domain exceptions for the meal planner."""


class MealPlannerError(Exception):
    """Base class for expected meal planner failures."""

    code = "error"


class NotFoundError(MealPlannerError):
    """A referenced entity does not exist or belongs to another user."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidInputError(MealPlannerError):
    """A request was rejected before any computation started."""

    code = "invalid_input"


class DataIntegrityError(MealPlannerError):
    """Stored data references something that can no longer be resolved."""

    code = "data_integrity"
