"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .document import SourceDocument, TransformedDocument


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the content pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, pattern, noAI,
          unprocessedPolicy, delimiter
        - env_check: sourceFiles, envOK
        - sources_read: documents
        - documents_transform: transformed
        - results_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing Markdown sources
        outputdir: Directory receiving transformed Markdown
        verbosity: Logging verbosity level (1-3)
        pattern: Glob selecting sources, relative to inputdir
        noAI: Treat the completion service as disabled
        unprocessedPolicy: "warn" or "strip" (None uses the configured default)
        delimiter: Section delimiter override (None uses the configured default)
        envOK: Environment validation passed
        sourceFiles: Resolved source paths
        documents: Parsed sources (frontmatter + body)
        transformed: Pipeline output per document
        writeResult: Summary of written files (files, written, unprocessed)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: str = field(default="")
    noAI: bool = field(default=False)
    unprocessedPolicy: Optional[str] = field(default=None)
    delimiter: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    sourceFiles: List[Path] = field(default_factory=list)
    documents: Optional[List[Any]] = field(default=None)  # List[SourceDocument] at runtime
    transformed: Optional[List[Any]] = field(default=None)  # List[TransformedDocument] at runtime
    writeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (pattern, noAI, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for pipeline output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that ProgramState knows about
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_read,
            documents_transform,
            results_write,
            results_report
        )

    This is equivalent to:
        results_report(results_write(documents_transform(sources_read(env_check(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
