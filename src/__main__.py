#!/usr/bin/env python3
"""
layoutsyntax - Markdown layout directive preprocessor

Expands ``::name`` layout directives in Markdown sources into HTML
fragments, resolving ``::ai`` completions first, and writes Markdown that
any CommonMark renderer can finish.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Text-first: Sources stay readable Markdown with light markup
    - Two phases: async AI completions, then synchronous directive rewriting
    - Never fatal: a broken directive leaves its text, not a failed build
    - Renderer-agnostic: output is Markdown plus HTML fragments

Usage:
    layoutsyntax inputdir/ outputdir/ [--pattern '**/*.md']

    Every matching file is written to the same relative path under
    outputdir/ with its frontmatter left as it was.

Examples:
    # Transform a content tree
    layoutsyntax content/ build/

    # Without completions, removing directives nobody handles
    layoutsyntax content/ build/ --noAI --unprocessedPolicy strip

    # Verbose output
    layoutsyntax content/ build/ -vv
"""

import asyncio
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    DirectiveEngine,
    DisabledAIService,
    __version__,
    LOG,
    state_connectToLogger,
    content_transform,
    frontmatter_join,
    frontmatter_split,
    service_fromSettings,
    unprocessed_find,
)
from .lib.frontmatter import FrontmatterError
from .lib.log import document_context
from .models import ProgramState, pipeline, SourceDocument, TransformedDocument


DISPLAY_TITLE = r"""
  _                         _                     _
 | | __ _ _   _  ___  _   _| |_ ___ _   _ _ __ | |_ __ ___  __
 | |/ _` | | | |/ _ \| | | | __/ __| | | | '_ \| __/ _` \ \/ /
 | | (_| | |_| | (_) | |_| | |_\__ \ |_| | | | | || (_| |>  <
 |_|\__,_|\__, |\___/ \__,_|\__|___/\__, |_| |_|\__\__,_/_/\_\
          |___/                     |___/

  Markdown layout directive preprocessor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="layoutsyntax - expand ::name layout directives in Markdown",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=appsettings.input_pattern,
    type=str,
    help="Glob selecting Markdown sources (relative to inputdir)",
)

parser.add_argument(
    "--noAI",
    default=False,
    action="store_true",
    help="Do not call the completion service; ::ai directives get a disabled marker",
)

parser.add_argument(
    "--unprocessedPolicy",
    default=None,
    choices=["warn", "strip"],
    help="What to do with directives no handler claimed (default from settings)",
)

parser.add_argument(
    "--delimiter",
    default=None,
    type=str,
    help="Section delimiter line inside block directives (default from settings)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and collect source files.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - sourceFiles: Sorted Markdown paths matching the pattern
            - envOK: True if environment is valid

    Exits:
        1 if inputdir does not exist or nothing matches the pattern
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    pattern = state.pattern or appsettings.input_pattern
    state.sourceFiles = sorted(path for path in state.inputdir.glob(pattern) if path.is_file())

    if not state.sourceFiles:
        print(f"Error: No files match '{pattern}' in {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Found {len(state.sourceFiles)} source file(s)", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_read(inputstate: ProgramState) -> ProgramState:
    """
    Read every source and split off its frontmatter.

    Args:
        inputstate: Program state with sourceFiles set

    Returns:
        ProgramState with added field:
            - documents: List[SourceDocument]

    Exits:
        1 if a file cannot be read or its frontmatter is invalid
    """

    state = inputstate.copy()

    LOG("Reading source files...", level=1)

    documents: List[SourceDocument] = []
    for path in state.sourceFiles:
        try:
            text = path.read_text(encoding="utf-8")
        except Exception as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            sys.exit(1)

        try:
            fields, raw, body = frontmatter_split(text)
        except FrontmatterError as e:
            print(f"Error in {path}: {e}", file=sys.stderr)
            sys.exit(1)

        documents.append(SourceDocument(
            path=path,
            relpath=path.relative_to(state.inputdir),
            frontmatter=fields,
            frontmatterRaw=raw,
            body=body,
        ))
        LOG(f"Read {len(text)} characters from {path.name}", level=3)

    state.documents = documents
    LOG(f"Read {len(documents)} document(s)", level=2)
    return state


async def documents_run(documents: List[SourceDocument], engine: DirectiveEngine, service) -> List[TransformedDocument]:
    """Transform documents one after the other on a single event loop"""
    results: List[TransformedDocument] = []
    for document in documents:
        with document_context(document.relpath):
            text = await content_transform(
                document.body, document.frontmatter, engine=engine, service=service, preprocess=True
            )
        results.append(TransformedDocument(
            source=document,
            text=text,
            unprocessed=unprocessed_find(text),
        ))
    return results


def documents_transform(inputstate: ProgramState) -> ProgramState:
    """
    Run the AI pass and the directive engine over every document.

    Args:
        inputstate: Program state with documents

    Returns:
        ProgramState with added field:
            - transformed: List[TransformedDocument]

    Exits:
        1 if documents is None or the engine cannot be built
    """

    state = inputstate.copy()

    LOG("Transforming documents...", level=1)

    if state.documents is None:
        print("Error: No documents available", file=sys.stderr)
        sys.exit(1)

    try:
        engine = DirectiveEngine(
            unprocessed_policy=state.unprocessedPolicy,
            delimiter=state.delimiter,
        )
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    service = DisabledAIService() if state.noAI else service_fromSettings()
    if not service.enabled:
        LOG("AI completions disabled", level=2)

    state.transformed = asyncio.run(documents_run(state.documents, engine, service))
    LOG(f"Transformed {len(state.transformed)} document(s)", level=2)
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write transformed documents under outputdir, frontmatter re-attached.

    Args:
        inputstate: Program state with transformed documents

    Returns:
        ProgramState with added field:
            - writeResult: Dict containing:
                - files: List[str] (written paths)
                - written: int (number of files written)
                - unprocessed: Dict[str, List[str]] (leftover names per file)

    Exits:
        1 if transformed is None or a write fails
    """

    state = inputstate.copy()

    if state.transformed is None:
        print("Error: Nothing to write", file=sys.stderr)
        sys.exit(1)

    files: List[str] = []
    unprocessed = {}
    for result in state.transformed:
        target = state.outputdir / result.source.relpath
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                frontmatter_join(result.source.frontmatterRaw, result.text), encoding="utf-8"
            )
        except Exception as e:
            print(f"Error writing {target}: {e}", file=sys.stderr)
            sys.exit(1)
        files.append(str(target))
        if result.unprocessed:
            unprocessed[str(result.source.relpath)] = result.unprocessed
        LOG(f"Wrote {target}", level=3)

    state.writeResult = {"files": files, "written": len(files), "unprocessed": unprocessed}
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Args:
        inputstate: Program state with writeResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Transformation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Transformation successful!", level=1)
        LOG(f"  Output: {state.outputdir}", level=1)
        LOG(f"  Files:  {state.writeResult['written']}", level=1)
        for relpath, names in state.writeResult["unprocessed"].items():
            LOG(f"  Unprocessed in {relpath}: {', '.join('::' + name for name in names)}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="layoutsyntax - Markdown layout directive preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - transform a tree of Markdown sources.

    Orchestrates the full pipeline:
        1. env_check: Validate inputdir and collect sources
        2. sources_read: Read files and split frontmatter
        3. documents_transform: Cleanup, AI pass, directive engine
        4. results_write: Write Markdown under outputdir
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - pattern: str - Source glob
            - noAI: bool - Disable completions
            - unprocessedPolicy: Optional[str] - warn or strip
            - delimiter: Optional[str] - Section delimiter
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing Markdown sources
        outputdir: Directory where transformed Markdown will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_read, documents_transform, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
