"""FastAPI application entrypoint for waymark service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..checker import CheckFailure, run_check_command
from ..config import WaymarkConfig, load_config
from ..docstrings import detect_docstring, extract_summary
from ..insertion import find_tldr_insertion_point
from ..models import CheckReport
from ..parsers import ParseFn, resolve_parser
from ..repo_scanner import expand_paths
from ..seed import SeedRun, build_seed_options, run_seed

_T = TypeVar("_T")


class CheckRequest(BaseModel):
    paths: List[str] = []
    strict: Optional[bool] = None


class CheckResponse(BaseModel):
    issues: List[Dict[str, Any]]
    summary: Dict[str, int]
    passed: bool


class InsertionPointRequest(BaseModel):
    content: str
    language: str
    file: str = "<memory>"


class InsertionPointResponse(BaseModel):
    line: Optional[int] = None


class DocstringRequest(BaseModel):
    content: str
    language: str


class DocstringResponse(BaseModel):
    docstring: Optional[Dict[str, Any]] = None
    summary: Optional[str] = None


class SeedRequest(BaseModel):
    paths: List[str] = []
    docstrings: bool = False
    codetags: bool = False
    all: bool = False


class SeedResponse(BaseModel):
    candidates: List[Dict[str, Any]]
    summary: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def _default_config() -> WaymarkConfig:
    return load_config(Path.cwd())


async def _run_blocking(func: Callable[[], _T]) -> _T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def create_app(
    config_factory: Callable[[], WaymarkConfig] = _default_config,
    parse: Optional[ParseFn] = None,
) -> FastAPI:
    """Create the FastAPI application exposing waymark operations."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    app = FastAPI(title="Waymark Service", version="1.0.0")

    async def get_config() -> WaymarkConfig:
        # Reload per request so edits to .waymark.yml apply without a restart.
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/check", response_model=CheckResponse)
    async def check(
        payload: CheckRequest,
        config: WaymarkConfig = Depends(get_config),
    ) -> CheckResponse:
        def _run_check() -> CheckReport | CheckFailure:
            return run_check_command(payload.paths, config, parse=parse, strict=payload.strict)

        result = await _run_blocking(_run_check)
        if isinstance(result, CheckFailure):
            raise RuntimeError(result.message)
        return CheckResponse(**result.to_dict())

    @app.post("/insertion-point", response_model=InsertionPointResponse)
    async def insertion_point(
        payload: InsertionPointRequest,
        config: WaymarkConfig = Depends(get_config),
    ) -> InsertionPointResponse:
        def _run_insertion() -> Optional[int]:
            parser = resolve_parser(parse, reference=config.parser)
            return find_tldr_insertion_point(
                payload.content, payload.language, parse=parser, file=payload.file
            )

        return InsertionPointResponse(line=await _run_blocking(_run_insertion))

    @app.post("/docstring", response_model=DocstringResponse)
    async def docstring(payload: DocstringRequest) -> DocstringResponse:
        info = detect_docstring(payload.content, payload.language)
        if info is None:
            return DocstringResponse()
        return DocstringResponse(docstring=info.to_dict(), summary=extract_summary(info))

    @app.post("/seed", response_model=SeedResponse)
    async def seed(
        payload: SeedRequest,
        config: WaymarkConfig = Depends(get_config),
    ) -> SeedResponse:
        def _run_seed() -> SeedRun:
            parser = resolve_parser(parse, reference=config.parser)
            options = build_seed_options(
                docstrings=payload.docstrings,
                codetags=payload.codetags,
                all_sources=payload.all,
                config=config.seed,
            )
            files = expand_paths(payload.paths, config)
            return run_seed(files, options, parse=parser, config=config)

        run = await _run_blocking(_run_seed)
        return SeedResponse(
            candidates=[candidate.to_dict() for candidate in run.candidates],
            summary=run.summary.to_dict(),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
