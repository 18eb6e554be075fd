from __future__ import annotations

import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class GraderType(enum.Enum):
    XML = "xml"
    JSON = "json"
    Text = "text"
    Number = "number"
    UnitTest = "unit_test"


class FieldType(enum.Enum):
    Int = "int"
    String = "string"
    Boolean = "boolean"
    Float = "float"

    @classmethod
    def _missing_(cls, value: object) -> FieldType | None:
        # exported task bundles spell booleans "bool"
        if value == "bool":
            return cls.Boolean
        return None


class ComparatorType(enum.Enum):
    Equals = "equals"
    Contains = "contains"
    Range = "range"
    Regex = "regex"


class ExtractionFailure(enum.Enum):
    Missing = "missing"
    MalformedContainer = "malformed_container"
    CoercionFailed = "coercion_failed"
