"""FastAPI application exposing suggestions and safe renames."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, NameReviewConfig, settings_from_env
from ..git.diff import detect_language
from ..llm.client import SuggestionClient
from ..llm.runner import LLMRunner
from ..llm.schema import NamingSuggestion, manual_suggestion
from ..models import RenameRequest, SymbolContext
from ..prompting import DEFAULT_EXAMPLES, PromptBuilder
from ..rename.orchestrator import RenameOrchestrator
from ..safety import should_auto_apply


class SuggestRequest(BaseModel):
    file: str
    language: Optional[str] = None
    old_name: str
    declaration_text: str
    declaration_line: int = 1
    usage_snippets: List[str] = Field(default_factory=list)
    neighbor_names: List[str] = Field(default_factory=list)
    enclosing_scope_names: List[str] = Field(default_factory=list)
    type_hints: Dict[str, str] = Field(default_factory=dict)
    change_title: str = ""
    change_description: str = ""


class SuggestResponse(BaseModel):
    suggestion: Optional[NamingSuggestion] = None
    auto_apply: bool = False


class RenameBody(BaseModel):
    file_path: str
    old_name: str
    new_name: str
    language: Optional[str] = None
    line_number: Optional[int] = None
    project_root: str = "."


class RenameResponse(BaseModel):
    success: bool
    file: str
    old_name: str
    new_name: str
    references_updated: int
    error: Optional[str] = None


class StatsResponse(BaseModel):
    total_tokens: int
    estimated_cost_usd: float
    api_calls: int
    cache_hit_rate: float


class HealthResponse(BaseModel):
    status: str


def _default_client() -> SuggestionClient:
    settings = settings_from_env()
    settings.require_api_key()
    return SuggestionClient(
        LLMRunner(settings),
        max_retries=settings.max_retries,
        prompt_builder=PromptBuilder(examples=DEFAULT_EXAMPLES),
    )


def create_app(
    client_factory: Callable[[], SuggestionClient] = _default_client,
    config: NameReviewConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application; one suggestion client is shared across requests."""

    app = FastAPI(title="namereview", version="0.1.0")
    settings = config or NameReviewConfig(root=Path.cwd())
    state: Dict[str, SuggestionClient] = {}

    def get_client() -> SuggestionClient:
        if "client" not in state:
            state["client"] = client_factory()
        return state["client"]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/suggest", response_model=SuggestResponse)
    async def suggest(payload: SuggestRequest) -> SuggestResponse:
        language = payload.language or detect_language(payload.file)
        if language is None:
            raise ValueError(f"Unsupported file type: {payload.file}")
        context = SymbolContext(
            file=payload.file,
            language=language,
            old_name=payload.old_name,
            declaration_text=payload.declaration_text,
            declaration_line=payload.declaration_line,
            usage_snippets=payload.usage_snippets,
            neighbor_names=payload.neighbor_names,
            enclosing_scope_names=payload.enclosing_scope_names,
            type_hints=payload.type_hints,
            change_title=payload.change_title,
            change_description=payload.change_description,
        )
        suggestion = await get_client().ask(context)
        if suggestion is None:
            return SuggestResponse()
        return SuggestResponse(
            suggestion=suggestion,
            auto_apply=should_auto_apply(
                suggestion, min_confidence=settings.autofix.min_confidence
            ),
        )

    @app.post("/rename", response_model=RenameResponse)
    async def rename(payload: RenameBody) -> RenameResponse:
        language = payload.language or detect_language(payload.file_path)
        if language is None:
            raise ValueError(f"Unsupported file type: {payload.file_path}")
        renamer = RenameOrchestrator(payload.project_root, tools=settings.tools)
        outcome = await renamer.perform(
            RenameRequest(
                file_path=payload.file_path,
                suggestion=manual_suggestion(payload.old_name, payload.new_name),
                language=language,
                line_number=payload.line_number,
            )
        )
        return RenameResponse(**asdict(outcome))

    @app.get("/stats", response_model=StatsResponse)
    async def stats() -> StatsResponse:
        return StatsResponse(**asdict(get_client().stats()))

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
