"""Report configuration DTOs (stored form)."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from report_engine.domain import entities
from report_engine.domain.enums import ComparisonOp, DataType, SortDirection
from report_engine.domain.errors import TypeMismatchError, UnknownPumpTypeError
from report_engine.domain.ports import PumpRegistryPort


class LiteralDocument(BaseModel):
    """Constant value.

    ``dataType`` records the type of the value so dates and times written as
    ISO strings come back as dates and times.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["literal"] = "literal"
    value: Any
    data_type: DataType | None = Field(default=None, alias="dataType")

    @classmethod
    def of(cls, value: Any) -> "LiteralDocument":
        """Stored form of a value with its inferred type."""
        return cls(value=value, data_type=DataType.infer(value))

    def to_value(self, fallback: DataType | None, target: str) -> Any:
        """Value converted to the stored type, or to ``fallback`` when untyped."""
        return _coerce(self.value, self.data_type or fallback, target)


class ParamRefDocument(BaseModel):
    """Reference to a runtime parameter."""

    kind: Literal["param"] = "param"
    name: str


class ComparisonDocument(BaseModel):
    """Operator applied to a literal or parameter."""

    kind: Literal["comparison"] = "comparison"
    op: ComparisonOp
    operand: Annotated[Union[LiteralDocument, ParamRefDocument], Field(discriminator="kind")]


ExprDocument = Annotated[
    Union[LiteralDocument, ParamRefDocument, ComparisonDocument],
    Field(discriminator="kind"),
]


class FilterDocument(BaseModel):
    """Filter on one field."""

    field: str
    expr: ExprDocument


class SortKeyDocument(BaseModel):
    """Sort level."""

    field: str
    direction: SortDirection = SortDirection.ASC


class ParameterDocument(BaseModel):
    """Declared report parameter."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    data_type: DataType = Field(alias="dataType")
    domain: list[Any] | None = None
    default: Any = None
    label: str | None = None


class ReportConfigDocument(BaseModel):
    """Stored report configuration.

    Option values may be plain JSON values or ``{"kind": "literal" | "param", ...}``
    expression objects. Plain date and time option values are stored as
    ``{"kind": "value", "value": ..., "dataType": ...}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    pump_type: str = Field(alias="pumpType")
    selected_fields: list[str] = Field(default_factory=list, alias="fields")
    filters: list[FilterDocument] = Field(default_factory=list)
    groups: list[str] = Field(default_factory=list)
    sort: list[SortKeyDocument] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)
    parameters: list[ParameterDocument] = Field(default_factory=list)

    def to_domain(self, registry: PumpRegistryPort | None = None) -> entities.ReportConfig:
        """Build the domain configuration.

        With a registry that knows the pump type, literal filter values are
        converted to the declared field types (ISO strings to dates, ...).
        """
        field_types = _field_types(self.pump_type, registry)

        return entities.ReportConfig(
            pump_type=self.pump_type,
            name=self.name,
            fields=tuple(self.selected_fields),
            filters=tuple(
                entities.Filter(f.field, _expr_to_domain(f.expr, field_types.get(f.field), f.field))
                for f in self.filters
            ),
            groups=tuple(self.groups),
            sort=tuple(entities.SortKey(s.field, s.direction) for s in self.sort),
            options={key: _option_to_domain(key, value) for key, value in self.options.items()},
            parameters=tuple(_parameter_to_domain(p) for p in self.parameters),
        )

    @classmethod
    def from_domain(cls, config: entities.ReportConfig) -> "ReportConfigDocument":
        """Build the stored form of a domain configuration."""
        return cls(
            name=config.name,
            pump_type=config.pump_type,
            selected_fields=list(config.fields),
            filters=[
                FilterDocument(field=f.field, expr=_expr_from_domain(f.expr))
                for f in config.filters
            ],
            groups=list(config.groups),
            sort=[SortKeyDocument(field=s.field, direction=s.direction) for s in config.sort],
            options={key: _option_from_domain(value) for key, value in config.options.items()},
            parameters=[
                ParameterDocument(
                    name=p.name,
                    data_type=p.data_type,
                    domain=list(p.domain) if p.domain is not None else None,
                    default=p.default,
                    label=p.label,
                )
                for p in config.parameters
            ],
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def _field_types(pump_type: str, registry: PumpRegistryPort | None) -> dict[str, DataType]:
    if registry is None:
        return {}
    try:
        pump_cls = registry.resolve(pump_type)
    except UnknownPumpTypeError:
        return {}
    return {f.name: f.data_type for f in pump_cls.fields()}


def _coerce(value: Any, data_type: DataType | None, target: str) -> Any:
    if data_type is None or value is None or data_type.accepts(value):
        return value
    try:
        return data_type.coerce(value)
    except ValidationError:
        raise TypeMismatchError(target, data_type.value, value) from None


def _expr_to_domain(
    expr: LiteralDocument | ParamRefDocument | ComparisonDocument,
    data_type: DataType | None,
    field_name: str,
) -> entities.FilterExpr:
    if isinstance(expr, ParamRefDocument):
        return entities.ParamRef(expr.name)
    if isinstance(expr, ComparisonDocument):
        return entities.Comparison(expr.op, _expr_to_domain(expr.operand, data_type, field_name))
    return entities.Literal(expr.to_value(data_type, f"field {field_name}"))


def _expr_from_domain(expr: entities.FilterExpr) -> LiteralDocument | ParamRefDocument | ComparisonDocument:
    if isinstance(expr, entities.ParamRef):
        return ParamRefDocument(name=expr.name)
    if isinstance(expr, entities.Comparison):
        return ComparisonDocument(op=expr.op, operand=_expr_from_domain(expr.operand))
    return LiteralDocument.of(expr.value)


def _option_to_domain(key: str, value: Any) -> Any:
    kind = value.get("kind") if isinstance(value, dict) else None
    if kind == "param":
        return entities.ParamRef(value["name"])
    if kind in ("literal", "value"):
        document = LiteralDocument.model_validate({**value, "kind": "literal"})
        converted = document.to_value(None, f"option {key}")
        return entities.Literal(converted) if kind == "literal" else converted
    return value


def _option_from_domain(value: Any) -> Any:
    if isinstance(value, entities.ParamRef):
        return {"kind": "param", "name": value.name}
    if isinstance(value, entities.Literal):
        return LiteralDocument.of(value.value).model_dump(by_alias=True)
    if DataType.infer(value) in (DataType.DATE, DataType.TIME):
        return {**LiteralDocument.of(value).model_dump(by_alias=True), "kind": "value"}
    return value


def _parameter_to_domain(document: ParameterDocument) -> entities.Parameter:
    target = f"parameter {document.name}"
    domain = None
    if document.domain is not None:
        domain = tuple(_coerce(v, document.data_type, target) for v in document.domain)
    return entities.Parameter(
        name=document.name,
        data_type=document.data_type,
        domain=domain,
        default=_coerce(document.default, document.data_type, target),
        label=document.label,
    )
