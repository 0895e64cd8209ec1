from .config_validator import validate_config
from .object_id import validate_object_id
from .rating_validators import validate_score

__all__ = ["validate_config", "validate_object_id", "validate_score"]
