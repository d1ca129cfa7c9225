import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, HTTPException, Query

from export_lens.models import (
    ExportMatchInfo,
    MatchRequest,
    MatchResponse,
    StripRequest,
    StripResponse,
    StrippedDeclaration,
)
from export_lens.services.export_analysis import (
    ExportAnalyzer,
    ExportMatch,
    UnsupportedFileError,
    collect_object_patterns,
    describe_property,
)
from export_lens.services.nodes import Program

router = APIRouter(prefix="/api/exports", tags=["exports"])

logger = logging.getLogger(__name__)

_analyzer = None


def get_export_analyzer() -> ExportAnalyzer:
    global _analyzer
    if _analyzer is None:
        _analyzer = ExportAnalyzer()
    return _analyzer


def _match_response(name: str, matches: List[ExportMatch]) -> MatchResponse:
    return MatchResponse(
        name=name,
        exported=bool(matches),
        matches=[
            ExportMatchInfo(form=m.form, start_line=m.start_line, end_line=m.end_line)
            for m in matches
        ],
    )


def _stripped_declarations(program: Program) -> List[StrippedDeclaration]:
    declarations = []
    for statement in program.body:
        if statement.type != "ExportNamedDeclaration":
            continue
        patterns = collect_object_patterns(statement)
        if not patterns:
            continue
        declarations.append(
            StrippedDeclaration(
                start_line=statement.start_line,
                end_line=statement.end_line,
                remaining=[[describe_property(p) for p in pattern.properties] for pattern in patterns],
            )
        )
    return declarations


@router.post("/match", response_model=MatchResponse)
async def match_export(request: MatchRequest):
    """
    Report whether the given module source exports `name` through a named
    export, and which declarations do so.
    """
    analyzer = get_export_analyzer()
    program = analyzer.parse(request.source, tsx=request.tsx)
    return _match_response(request.name, analyzer.find_named_exports(program, request.name))


@router.get("/file", response_model=MatchResponse)
async def match_export_in_file(
    path: str = Query(..., description="Absolute path to the module"),
    name: str = Query(..., min_length=1, description="Exported name to look for"),
):
    """
    Same as `/match`, reading the module from disk.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=400, detail="Path is not a file")

    analyzer = get_export_analyzer()
    try:
        program = analyzer.parse_file(str(file_path))
    except UnsupportedFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error("Failed to read %s: %s", file_path, e)
        raise HTTPException(status_code=500, detail=f"Failed to read file: {str(e)}")

    return _match_response(name, analyzer.find_named_exports(program, name))


@router.post("/strip-properties", response_model=StripResponse)
async def strip_export_properties(request: StripRequest):
    """
    Remove destructured properties bound to any of `names` from the named
    exports in the source, and report what is left in each pattern.
    """
    analyzer = get_export_analyzer()
    program = analyzer.parse(request.source, tsx=request.tsx)
    removed = analyzer.remove_export_properties(program, request.names)
    return StripResponse(removed_count=removed, declarations=_stripped_declarations(program))
