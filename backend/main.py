"""Main entry point for the Nutrition Assistant chat API."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS
from logger import setup_logging
from models.api import ChatRequest, ChatResponse
from services.chat_pipeline import ChatPipeline
from services.errors import ChatError
from services.retrieval_engine import RetrievalEngine
from services.llm_client import LLMClient
from services.vector_store import VectorStore
from services.embedding_model import EmbeddingModel

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-store"}

# Process-wide service handles, built once on startup
embedding_model: EmbeddingModel = None
vector_store: VectorStore = None
retrieval_engine: RetrievalEngine = None
llm_client: LLMClient = None
chat_pipeline: ChatPipeline = None


def init_services() -> None:
    """Initialize services on startup."""
    global embedding_model, vector_store, retrieval_engine, llm_client, chat_pipeline

    logger.info("Initializing Nutrition Assistant services...")

    try:
        embedding_model = EmbeddingModel()
        vector_store = VectorStore()
        retrieval_engine = RetrievalEngine(vector_store, embedding_model)
        logger.info("Initialized RetrievalEngine")

        llm_client = LLMClient()
        logger.info("Initialized LLMClient")

        chat_pipeline = ChatPipeline(retrieval_engine, llm_client)
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL, LOG_FORMAT)
    init_services()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Nutrition Assistant",
    description="Answers questions about a nutrition textbook with cited passages",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=NO_CACHE_HEADERS
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or non-object bodies get the same error shape as an empty query."""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return error_response(400, "Invalid request body")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Nutrition Assistant API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "nutrition-assistant",
        "version": "1.0.0",
        "ready": chat_pipeline is not None,
        "scope": retrieval_engine.describe() if retrieval_engine is not None else None
    }


@app.post("/chat", response_model=ChatResponse)
def chat_endpoint(request: ChatRequest):
    """
    Answer a question about the document with cited sources.

    Runs as a sync handler so concurrent requests are served from the
    thread pool while each one walks the pipeline sequentially.

    Args:
        request: ChatRequest with the user's message

    Returns:
        200 {"answer", "sources"}; 400 {"error"} for an empty message;
        500 {"error"} for any embedding, retrieval or generation failure
    """
    try:
        result = chat_pipeline.answer(request.message)
    except ChatError as e:
        if e.status_code >= 500:
            logger.error(f"api/chat error ({e.code}): {e.message}")
        else:
            logger.info(f"Rejected chat request ({e.code}): {e.message}")
        return error_response(e.status_code, e.message or "Unknown error")
    except Exception as e:
        message = str(e)
        logger.error(f"api/chat error: {message}", exc_info=True)
        return error_response(500, message or "Unknown error")

    response = ChatResponse(answer=result.answer, sources=result.sources)
    return JSONResponse(
        status_code=200,
        content=response.model_dump(),
        headers=NO_CACHE_HEADERS
    )


if __name__ == "__main__":
    import uvicorn
    setup_logging(LOG_LEVEL, LOG_FORMAT)
    logger.info(f"Starting Nutrition Assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
