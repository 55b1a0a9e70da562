"""Run a report - main orchestration."""

import pandas as pd
import structlog

from report_engine.application.services.planner import OptionsPlan, plan_options
from report_engine.application.services.resolution import (
    ResolutionContext,
    resolve_filters,
    resolve_options,
    warn_undeclared,
)
from report_engine.application.services.row_ops import (
    FrameGroup,
    apply_filters,
    group_rows,
    sort_groups,
    to_frame,
    to_result_rows,
)
from report_engine.application.use_cases.validate_report_config import (
    run as validate_config,
)
from report_engine.domain.entities import ReportConfig, ResultTable
from report_engine.domain.enums import RunStage
from report_engine.domain.errors import PumpGenerationFailedError
from report_engine.domain.ports import PumpRegistryPort
from report_engine.domain.pump import DataPump
from report_engine.domain.types import ParamValues
from report_engine.infrastructure.observability.metrics import (
    rows_generated,
    run_duration_seconds,
    runs_failed,
    runs_started,
    runs_succeeded,
)
from report_engine.infrastructure.pumps.registry import default_registry

logger = structlog.get_logger()


class Report:
    """One execution of a ReportConfig with one set of parameter values.

    Stages run in order and none is revisited::

        configured -> parameters_resolved -> generated -> grouped -> sorted -> complete

    Any failure aborts the run at its stage; no partial result is returned
    and nothing is retried. The config and the parameter mapping are only
    read.
    """

    def __init__(
        self,
        config: ReportConfig,
        params: ParamValues | None = None,
        registry: PumpRegistryPort | None = None,
    ) -> None:
        """Initialize report run."""
        self.config = config
        self.params: ParamValues = params if params is not None else {}
        self.registry = registry if registry is not None else default_registry
        self.stage: RunStage | None = None
        self.columns: tuple[str, ...] = ()
        self._log = logger.bind(report=config.name, pump_type=config.pump_type)

    @classmethod
    def run(
        cls,
        config: ReportConfig,
        params: ParamValues | None = None,
        registry: PumpRegistryPort | None = None,
    ) -> ResultTable:
        """Run a report configuration with runtime parameter values."""
        return cls(config, params, registry).execute()

    def execute(self) -> ResultTable:
        """Run every stage and return the result table."""
        pump_type = self.config.pump_type
        runs_started.labels(pump_type=pump_type).inc()
        self._log.info("report_run_started", parameters=sorted(self.params))

        try:
            with run_duration_seconds.time():
                pump_cls = self._configure()
                plan = self._resolve_parameters(pump_cls)
                frame = self._generate(pump_cls, plan)
                root = self._group(frame)
                root = self._sort(root)
                result = self._complete(root)
        except Exception as e:
            error_code = _classify_error(e)
            runs_failed.labels(pump_type=pump_type, error_code=error_code).inc()
            self._log.error(
                "report_run_failed",
                last_stage=self.stage.value if self.stage else None,
                error_code=error_code,
                error_message=str(e),
            )
            raise

        runs_succeeded.labels(pump_type=pump_type).inc()
        self._log.info(
            "report_run_completed",
            columns=list(result.columns),
            top_level_rows=len(result.rows),
        )
        return result

    def _advance(self, stage: RunStage) -> None:
        self.stage = stage
        self._log.debug("report_stage_reached", stage=stage.value)

    # ========================================================================
    # Stages
    # ========================================================================

    def _configure(self) -> type[DataPump]:
        pump_cls = self.registry.resolve(self.config.pump_type)
        self.columns = validate_config(self.config, pump_cls.schema)
        self._advance(RunStage.CONFIGURED)
        return pump_cls

    def _resolve_parameters(self, pump_cls: type[DataPump]) -> OptionsPlan:
        context = ResolutionContext(self.config.parameters, self.params)
        context.resolve_declared()
        warn_undeclared(context, self.config.name)

        field_types = {f.name: f.data_type for f in pump_cls.fields()}
        resolved_filters = resolve_filters(self.config.filters, context, field_types)
        resolved_options = resolve_options(self.config.options, context)

        plan = plan_options(
            self.columns,
            resolved_filters,
            resolved_options,
            pump_cls.filterable_fields(),
        )
        self._advance(RunStage.PARAMETERS_RESOLVED)
        return plan

    def _generate(self, pump_cls: type[DataPump], plan: OptionsPlan) -> pd.DataFrame:
        self._log.info(
            "pump_generate_started",
            pushed_filters=len(plan.pushed_filters),
            post_filters=len(plan.post_filters),
        )
        try:
            pump = pump_cls()
            rows = pump.generate(plan.pump_options())
            field_types = {f.name: f.data_type for f in pump_cls.fields()}
            frame = to_frame(rows, pump_cls.output_shape(), field_types)
        except Exception as e:
            self._log.error("pump_generate_failed", error=str(e), exc_info=True)
            raise PumpGenerationFailedError(
                self.config.pump_type,
                str(e) or type(e).__name__,
            ) from e

        rows_generated.observe(len(frame))
        frame = apply_filters(frame, plan.post_filters)
        self._log.info("pump_generate_completed", row_count=len(frame))
        self._advance(RunStage.GENERATED)
        return frame

    def _group(self, frame: pd.DataFrame) -> FrameGroup:
        root = group_rows(frame, self.config.groups)
        self._advance(RunStage.GROUPED)
        return root

    def _sort(self, root: FrameGroup) -> FrameGroup:
        root = sort_groups(root, self.config.sort)
        self._advance(RunStage.SORTED)
        return root

    def _complete(self, root: FrameGroup) -> ResultTable:
        result = ResultTable(
            columns=self.columns,
            rows=to_result_rows(root, self.columns),
            group_by=self.config.groups,
        )
        self._advance(RunStage.COMPLETE)
        return result


# ============================================================================
# Error Handling
# ============================================================================


def _classify_error(error: Exception) -> str:
    """Classify error and return error code."""
    return getattr(error, "code", "INTERNAL_ERROR")


def run(
    config: ReportConfig,
    params: ParamValues | None = None,
    registry: PumpRegistryPort | None = None,
) -> ResultTable:
    """Run report configuration."""
    return Report.run(config, params, registry)
