from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from dataclasses import replace
import tempfile
from typing import Optional
import os

from docsum.config import SummarizerConfig, load_service_config
from docsum.errors import ConfigurationError, EmptyInputError, ServiceError, SummarizerError
from docsum.llm import CompletionPort, build_port
from docsum.loader import load_document
from docsum.logging import API, configure_logging, get_logger
from docsum.pipeline import summarize_text

configure_logging()
logger = get_logger(__name__)

app = FastAPI(title="Document Summarizer API", version="0.2.0")

# -------------------------------------------------------------
# CORS (frontend dev runs on a different port e.g. 5173)
# -------------------------------------------------------------
origins_env = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
origins = [o.strip() for o in origins_env.split(",") if o.strip()]
# Support wildcard shortcut
allow_origins = ["*"] if any(o == "*" for o in origins) else origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_port: Optional[CompletionPort] = None


def get_port() -> CompletionPort:
    global _port
    if _port is None:
        _port = build_port(load_service_config())
    return _port


class SummarizeRequest(BaseModel):
    text: str
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[int] = None
    temperature: Optional[float] = None
    system_instruction: Optional[str] = None
    max_workers: Optional[int] = None
    sequential: bool = False
    stuff: bool = False
    max_context_chars: Optional[int] = None


def _config(**overrides) -> SummarizerConfig:
    # unset request fields fall back to CHUNK_SIZE, CHUNK_OVERLAP, ... from the environment
    return replace(SummarizerConfig.from_env(), **{k: v for k, v in overrides.items() if v is not None})


def _run(port: CompletionPort, text: str, config: SummarizerConfig) -> dict:
    try:
        return summarize_text(port, text, config).as_dict()
    except ServiceError as e:
        logger.error(f"{API} completion service failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except (ConfigurationError, EmptyInputError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/summarize")
def summarize(req: SummarizeRequest, port: CompletionPort = Depends(get_port)):
    config = _config(
        window_size=req.chunk_size,
        overlap_size=req.chunk_overlap,
        temperature=req.temperature,
        system_instruction=req.system_instruction,
        max_workers=req.max_workers,
        carry_context=req.sequential,
        max_context_chars=req.max_context_chars,
        stuff_threshold=len(req.text) if req.stuff else None,
    )
    return _run(port, req.text, config)


@app.post("/summarize-pdf")
def summarize_pdf(
    file: UploadFile = File(...),
    chunk_size: Optional[int] = Form(None),
    chunk_overlap: Optional[int] = Form(None),
    system_instruction: Optional[str] = Form(None),
    sequential: bool = Form(False),
    port: CompletionPort = Depends(get_port),
):
    if file.content_type != "application/pdf":
        raise HTTPException(status_code=400, detail="Only PDF supported")
    content = file.file.read()
    if len(content) == 0:
        raise HTTPException(status_code=400, detail="Empty file uploaded")
    with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as tmp:
        tmp.write(content)
        path = tmp.name
    try:
        text = load_document(path)
    except EmptyInputError:
        raise HTTPException(status_code=400, detail="PDF contains no extractable text")
    except RuntimeError as e:  # pragma: no cover
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        os.unlink(path)
    config = _config(
        window_size=chunk_size,
        overlap_size=chunk_overlap,
        system_instruction=system_instruction,
        carry_context=sequential,
    )
    return _run(port, text, config)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc):
    logger.error(f"{API} configuration error: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(SummarizerError)
async def summarizer_error_handler(request, exc):  # pragma: no cover
    return JSONResponse(status_code=500, content={"error": str(exc)})
