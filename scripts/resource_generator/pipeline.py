"""
Resource pipeline coordinator.
Runs the configured strings and asset generation steps, tracking state and errors.
"""

import time
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable, Set
from dataclasses import dataclass, field

from .config import GeneratorConfig, OutputConfig
from .processing.strings_catalog import parse_strings, unify_entries
from .processing.asset_catalog import AssetCatalog, AssetCatalogBuilder
from .processing.renderer import (
    TemplateRenderer, strings_context, assets_context,
    DEFAULT_STRINGS_TEMPLATE, DEFAULT_ASSETS_TEMPLATE
)


class PipelineStep(Enum):
    """Enumeration of pipeline steps."""
    STRINGS = "strings"
    ASSETS = "assets"


@dataclass
class StepResult:
    """Result of a pipeline step execution."""
    step: PipelineStep
    success: bool
    duration: float
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)


@dataclass
class PipelineState:
    """Current state of the pipeline execution."""
    current_step: Optional[PipelineStep] = None
    completed_steps: Set[PipelineStep] = field(default_factory=set)
    failed_steps: Set[PipelineStep] = field(default_factory=set)
    skipped_steps: Set[PipelineStep] = field(default_factory=set)
    step_results: Dict[PipelineStep, StepResult] = field(default_factory=dict)
    output_files: List[Path] = field(default_factory=list)
    start_time: Optional[float] = None


class PipelineError(Exception):
    """Base exception for pipeline errors."""
    def __init__(self, message: str, step: Optional[PipelineStep] = None):
        super().__init__(message)
        self.step = step


class ResourcePipeline:
    """
    Pipeline coordinator that generates code for every configured resource kind.

    Strings inputs are aggregated into one key table and asset catalogs are
    merged into one tree before rendering, so each output is written once.
    """

    def __init__(self, config: GeneratorConfig, renderer: Optional[TemplateRenderer] = None):
        """
        Initialize the pipeline.

        Args:
            config: Generator configuration
            renderer: Template renderer; built from config.template_dir when omitted
        """
        self.config = config
        self.state = PipelineState()
        self.logger = self._setup_logging()
        self.renderer = renderer or TemplateRenderer(config.template_dir)

        # Step handlers
        self._step_handlers: Dict[PipelineStep, Callable[[], Dict[str, Any]]] = {
            PipelineStep.STRINGS: self._execute_strings_step,
            PipelineStep.ASSETS: self._execute_assets_step,
        }

    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the pipeline."""
        logger = logging.getLogger("resource_generator")

        if not logger.handlers:
            logger.setLevel(logging.INFO)
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def run(self, steps: Optional[List[PipelineStep]] = None) -> PipelineState:
        """
        Run the configured generation steps.

        Args:
            steps: Optional list of specific steps to run. If None, runs all steps.

        Returns:
            Final pipeline state

        Raises:
            PipelineError: If any step fails
        """
        if steps is None:
            steps = list(PipelineStep)

        self.logger.info("Starting resource generation")
        self.state.start_time = time.time()

        for step in steps:
            if not self._is_configured(step):
                self.logger.info(f"Skipping step {step.value} (not configured)")
                self.state.skipped_steps.add(step)
                continue
            self._execute_step(step)

        return self.state

    def _is_configured(self, step: PipelineStep) -> bool:
        if step == PipelineStep.STRINGS:
            return self.config.strings is not None
        return self.config.xcassets is not None

    def _execute_step(self, step: PipelineStep) -> None:
        """
        Execute a single pipeline step with error handling and timing.

        Args:
            step: Step to execute
        """
        self.state.current_step = step
        self.logger.info(f"Executing step: {step.value}")

        start_time = time.time()

        try:
            result = self._step_handlers[step]()
        except Exception as e:
            duration = time.time() - start_time
            self.state.step_results[step] = StepResult(
                step=step,
                success=False,
                duration=duration,
                message=f"Step {step.value} failed: {e}",
                errors=[str(e)]
            )
            self.state.failed_steps.add(step)
            self.logger.error(f"Step {step.value} failed after {duration:.2f}s: {e}")
            raise PipelineError(f"Step {step.value} failed: {e}", step) from e

        duration = time.time() - start_time
        self.state.step_results[step] = StepResult(
            step=step,
            success=True,
            duration=duration,
            message=f"Step {step.value} completed successfully",
            data=result
        )
        self.state.completed_steps.add(step)
        self.logger.info(f"Step {step.value} completed in {duration:.2f}s")

    # Step execution methods
    def _execute_strings_step(self) -> Dict[str, Any]:
        """Parse every strings input and render the unified key table."""
        section = self.config.strings

        catalogs = []
        for input_path in section.inputs:
            catalogs.extend(parse_strings(input_path, self.config.development_locale))

        if not catalogs:
            raise PipelineError("No strings inputs configured", PipelineStep.STRINGS)

        table = unify_entries(catalogs)
        context = strings_context(catalogs[0].filename, table)

        outputs = self._render_outputs(section.outputs, context, DEFAULT_STRINGS_TEMPLATE)
        return {
            "catalogs": len(catalogs),
            "strings": len(table),
            "outputs": [str(path) for path in outputs],
        }

    def _execute_assets_step(self) -> Dict[str, Any]:
        """Parse every asset catalog input, merge them and render."""
        section = self.config.xcassets
        builder = AssetCatalogBuilder(
            bundle=self.config.bundle,
            development_locale=self.config.development_locale,
        )

        catalog: Optional[AssetCatalog] = None
        for input_path in section.inputs:
            parsed = builder.build(input_path)
            catalog = parsed if catalog is None else catalog.merging(parsed)

        if catalog is None:
            raise PipelineError("No asset catalog inputs configured", PipelineStep.ASSETS)

        outputs = self._render_outputs(section.outputs, assets_context(catalog), DEFAULT_ASSETS_TEMPLATE)
        totals = catalog.root.count()
        return {
            "catalog": catalog.filename,
            "images": totals["images"],
            "colors": totals["colors"],
            "data_assets": totals["data_assets"],
            "outputs": [str(path) for path in outputs],
        }

    def _render_outputs(self, outputs: List[OutputConfig], context: Dict[str, Any], default_template: str) -> List[Path]:
        written = []
        for output in outputs:
            content = self.renderer.render(
                context,
                template_name=output.template_name or default_template,
                template_path=output.template_path,
            )
            path = self.renderer.write_output(content, output.output)
            self.state.output_files.append(path)
            written.append(path)
        return written

