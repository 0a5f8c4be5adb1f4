import logging
from dataclasses import replace
from typing import List, Optional

from app.core.enums import ConversionState
from ..domain.errors import InputNotFoundError, StagingFailedError
from ..domain.models import ConversionFailure, ConversionOutcome, ConversionRequest, ResolvedInput
from . import command_builder
from .engine import ConversionEngine
from .janitor import TempFileJanitor
from .path_resolver import PathResolver
from .progress import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)

# Legal moves of a single request. Nothing skips a state;
# FAILED is only reachable from RESOLVING and CONVERTING.
TRANSITIONS = {
    ConversionState.IDLE: {ConversionState.RESOLVING},
    ConversionState.RESOLVING: {ConversionState.BUILDING, ConversionState.FAILED},
    ConversionState.BUILDING: {ConversionState.CONVERTING},
    ConversionState.CONVERTING: {ConversionState.COMPLETED, ConversionState.FAILED},
    ConversionState.COMPLETED: set(),
    ConversionState.FAILED: set(),
}


class ConversionRun:
    """
    Per-request state machine. Lives only for the duration of one convert() call.
    """

    def __init__(self, request: ConversionRequest):
        self.request = request
        self.state = ConversionState.IDLE
        self.history: List[ConversionState] = [ConversionState.IDLE]

    def advance(self, new_state: ConversionState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal conversion transition: {self.state.value} -> {new_state.value}")
        logger.debug(f"{self.request.input_reference}: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


class ConversionOrchestrator:
    """
    The pipeline: PathResolver -> CommandBuilder -> ConversionEngine -> TempFileJanitor.
    Holds no per-request state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        resolver: Optional[PathResolver] = None,
        engine: Optional[ConversionEngine] = None,
        janitor: Optional[TempFileJanitor] = None,
    ):
        self.resolver = resolver or PathResolver()
        self.engine = engine or ConversionEngine()
        self.janitor = janitor or TempFileJanitor(self.resolver.staging_dir)

    def convert(self, request: ConversionRequest, on_progress: Optional[ProgressCallback] = None) -> ConversionOutcome:
        """
        Converts one request.

        Args:
            request: What to convert and where to.
            on_progress: Optional sink for ConversionProgress events. Exceptions
                         it raises are logged and ignored.

        Returns:
            ConversionSuccess with the output path, or ConversionFailure tagged
            with the failure kind and diagnostic text.
        """
        run = ConversionRun(request)
        progress = ProgressReporter(on_progress)
        resolved: Optional[ResolvedInput] = None

        logger.info(f"Converting {request.input_reference} -> {request.desired_output_path} "
                    f"({request.output_format.value})")

        try:
            # 1. Resolve input to a readable local file
            run.advance(ConversionState.RESOLVING)
            try:
                resolved = self.resolver.resolve(request.input_reference)
            except InputNotFoundError as e:
                return self._fail_early(run, progress, e)
            except StagingFailedError as e:
                if e.staged_path is not None:
                    # Partial copy still belongs to this request
                    resolved = ResolvedInput(local_path=e.staged_path, was_staged=True)
                return self._fail_early(run, progress, e)

            # 2. Build the command
            run.advance(ConversionState.BUILDING)
            command = command_builder.build_for_request(request, resolved)

            # 3. Run the engine
            run.advance(ConversionState.CONVERTING)
            outcome = self.engine.run(command, progress)

            run.advance(ConversionState.COMPLETED if outcome.succeeded else ConversionState.FAILED)
            outcome = replace(outcome, history=tuple(run.history))
            if outcome.succeeded:
                logger.info(f"Conversion completed: {outcome.output_path}")
            return outcome

        except Exception as e:
            # Unexpected fault: still report it once, then let it propagate
            logger.exception(f"Conversion of {request.input_reference} crashed: {e}")
            if not progress.reported_error:
                progress.error(str(e) or type(e).__name__)
            raise

        finally:
            # 4. Release the staged input, whatever happened above
            if resolved is not None:
                self.janitor.cleanup(resolved)

    @staticmethod
    def _fail_early(run: ConversionRun, progress: ProgressReporter, error) -> ConversionFailure:
        logger.error(f"Could not resolve input: {error}")
        run.advance(ConversionState.FAILED)
        progress.error(str(error))
        return ConversionFailure(
            kind=error.kind,
            diagnostic_log=str(error),
            error=error,
            history=tuple(run.history),
        )
