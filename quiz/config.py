# =============================================================================
# CONFIGURACAO DO QUIZ ENGINE
# =============================================================================
# Valores lidos de variaveis de ambiente (com suporte a .env)
# =============================================================================

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .models.enums import ShortfallPolicy
from .models.schemas import MAX_TOTAL_QUESTIONS

# Endpoint chat-completions compativel com OpenAI (router do Hugging Face)
DEFAULT_COMPLETION_URL = "https://router.huggingface.co/v1/chat/completions"
DEFAULT_COMPLETION_MODEL = "meta-llama/Llama-3.1-8B-Instruct:fireworks-ai"


@dataclass
class QuizSettings:
    """Configuracao centralizada do quiz engine.

    Attributes:
        completion_provider: "huggingface" (HTTP) ou "claude" (Claude Agent SDK)
        api_key: Credencial do endpoint HTTP de completion
        completion_url: URL do endpoint chat-completions
        completion_model: Modelo usado no endpoint HTTP
        completion_timeout: Timeout (s) de cada chamada de completion
        claude_model: Modelo usado pelo Claude Agent SDK
        max_content_length: Caracteres de conteudo enviados no prompt de geracao
        max_total_questions: Limite total de questoes por quiz
        saq_threshold: Similaridade minima (%) para SAQ
        laq_threshold: Similaridade minima (%) para LAQ
        shortfall_policy: O que fazer quando vierem menos questoes que o pedido
        batch_delay: Pausa (s) entre avaliacoes de um lote
        agentfs_id: ID do AgentFS usado como store
        cors_origins: Origens permitidas no servidor
        log_level: Nivel de log
    """

    completion_provider: str = "huggingface"
    api_key: str | None = None
    completion_url: str = DEFAULT_COMPLETION_URL
    completion_model: str = DEFAULT_COMPLETION_MODEL
    completion_timeout: float = 60.0
    claude_model: str = "haiku"
    max_content_length: int = 3000
    max_total_questions: int = MAX_TOTAL_QUESTIONS
    saq_threshold: int = 90
    laq_threshold: int = 75
    shortfall_policy: ShortfallPolicy = ShortfallPolicy.ACCEPT
    batch_delay: float = 0.5
    agentfs_id: str = "quiz-engine"
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "QuizSettings":
        """Cria configuracao a partir das variaveis de ambiente.

        Args:
            load_env_file: Se True, carrega .env antes de ler as variaveis
        """
        if load_env_file:
            load_dotenv()

        origins = os.getenv("CORS_ORIGINS")

        return cls(
            completion_provider=os.getenv("COMPLETION_PROVIDER", "huggingface").lower(),
            api_key=os.getenv("HF_API_KEY") or None,
            completion_url=os.getenv("COMPLETION_API_URL", DEFAULT_COMPLETION_URL),
            completion_model=os.getenv("COMPLETION_MODEL", DEFAULT_COMPLETION_MODEL),
            completion_timeout=float(os.getenv("COMPLETION_TIMEOUT", "60")),
            claude_model=os.getenv("CLAUDE_MODEL", "haiku"),
            max_content_length=int(os.getenv("MAX_CONTENT_LENGTH", "3000")),
            max_total_questions=min(
                int(os.getenv("MAX_TOTAL_QUESTIONS", str(MAX_TOTAL_QUESTIONS))),
                MAX_TOTAL_QUESTIONS,
            ),
            saq_threshold=int(os.getenv("SAQ_THRESHOLD", "90")),
            laq_threshold=int(os.getenv("LAQ_THRESHOLD", "75")),
            shortfall_policy=ShortfallPolicy(os.getenv("SHORTFALL_POLICY", "accept").lower()),
            batch_delay=float(os.getenv("BATCH_DELAY", "0.5")),
            agentfs_id=os.getenv("AGENTFS_ID", "quiz-engine"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins
            else ("http://localhost:3000",),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
