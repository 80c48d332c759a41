# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Fixtures de ambiente para testes unitarios sem dependencias externas
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env():
    """Configura variaveis de ambiente para testes."""
    env_vars = {
        "COMPLETION_PROVIDER": "huggingface",
        "HF_API_KEY": "hf_test_key_123",
        "AGENTFS_ID": "quiz-test",
        "BATCH_DELAY": "0",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        yield


@pytest.fixture(autouse=True)
def reset_app_state():
    """Limpa singletons do app_state entre testes."""
    import app_state

    app_state.settings = None
    app_state.agentfs = None
    app_state.completion_client = None
    yield
    app_state.settings = None
    app_state.agentfs = None
    app_state.completion_client = None


@pytest.fixture
def capture_logs(caplog):
    """Captura logs durante testes."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog
