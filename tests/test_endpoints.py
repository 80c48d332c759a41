# =============================================================================
# TESTES DE INTEGRACAO - Endpoints
# =============================================================================
# Testes de integracao usando FastAPI TestClient (sem servidor externo)
# =============================================================================

import pytest

BIOLOGY_TEXT = "Photosynthesis converts light energy into chemical energy stored as glucose."

GENERATE_BODY = {
    "configuration": {"name": "Biology Basics", "difficulty": "easy", "mcq_count": 1, "saq_count": 1, "laq_count": 1},
    "document_ids": ["doc-1"],
}


@pytest.fixture
def seeded_agentfs(mock_agentfs_with_data):
    """AgentFS em memoria com um documento extraido."""
    mock_agentfs_with_data._storage["content:doc-1"] = {
        "document_id": "doc-1",
        "file_name": "biology.pdf",
        "extracted_text": BIOLOGY_TEXT,
        "status": "completed",
    }
    return mock_agentfs_with_data


@pytest.fixture
def make_client(seeded_agentfs):
    """Factory de TestClient com QuizEngine injetado (sem servidor rodando)."""
    from fastapi.testclient import TestClient

    from quiz.config import QuizSettings
    from quiz.engine.quiz_engine import QuizEngine
    from quiz.router import get_quiz_engine
    from quiz.storage import AgentFSContentStore, QuizStore
    from server import app

    def factory(completion_client, **settings_overrides):
        settings = QuizSettings(api_key="hf_test", batch_delay=0.0, **settings_overrides)
        engine = QuizEngine(
            store=QuizStore(seeded_agentfs),
            content_store=AgentFSContentStore(seeded_agentfs),
            completion_client=completion_client,
            settings=settings,
        )
        app.dependency_overrides[get_quiz_engine] = lambda: engine
        return TestClient(app)

    yield factory

    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, fake_completion, generation_text, judgment_text):
    """Cliente com geracao valida e julgamento correto."""
    return make_client(fake_completion(generation_text, judgment=judgment_text))


def _generate(client) -> str:
    response = client.post("/quiz/generate", json=GENERATE_BODY)
    assert response.status_code == 200
    return response.json()["quiz_id"]


class TestHealthEndpoints:
    """Testes dos endpoints de health check."""

    def test_root_returns_ok(self, client):
        """GET / - Deve retornar status ok."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_returns_healthy(self, client):
        """GET /health - Deve retornar status healthy."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "completion_provider" in data


class TestGenerateEndpoint:
    """Testes de POST /quiz/generate."""

    def test_generate_ready(self, client):
        """Geracao valida retorna quiz READY com todas as questoes."""
        response = client.post("/quiz/generate", json=GENERATE_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["total_marks"] == 9
        assert data["requested_questions"] == 3
        assert data["generated_questions"] == 3
        assert data["shortfall"] is False
        assert [q["marks"] for q in data["questions"]] == [1, 3, 5]

    @pytest.mark.parametrize(
        "configuration,message",
        [
            ({"name": "x"}, "At least one question type must be selected"),
            ({"name": "   ", "mcq_count": 1}, "Quiz name is required"),
            ({"name": "x", "mcq_count": 20, "saq_count": 11}, "Total questions cannot exceed 30"),
        ],
    )
    def test_invalid_configuration(self, make_client, fake_completion, generation_text, configuration, message):
        """Configuracao invalida retorna 400 sem chamar o servico."""
        completion = fake_completion(generation_text)
        client = make_client(completion)

        response = client.post("/quiz/generate", json={"configuration": configuration, "document_ids": ["doc-1"]})

        assert response.status_code == 400
        assert response.json()["detail"] == message
        assert completion.calls == 0

    def test_missing_document_ids(self, client):
        """Corpo sem document_ids falha na validacao do FastAPI."""
        response = client.post("/quiz/generate", json={"configuration": {"name": "x", "mcq_count": 1}})

        assert response.status_code == 422

    def test_over_configured_cap(self, make_client, fake_completion, generation_text):
        """Total acima do limite configurado retorna 400 sem chamar o servico."""
        completion = fake_completion(generation_text)
        client = make_client(completion, max_total_questions=2)

        response = client.post("/quiz/generate", json=GENERATE_BODY)

        assert response.status_code == 400
        assert completion.calls == 0

    def test_upstream_failure(self, make_client, failing_completion):
        """Falha do servico de completion retorna 502."""
        client = make_client(failing_completion)

        response = client.post("/quiz/generate", json=GENERATE_BODY)

        assert response.status_code == 502
        assert "timed out" in response.json()["detail"]

    def test_no_content(self, client):
        """Documentos sem conteudo retornam 422."""
        body = {**GENERATE_BODY, "document_ids": ["missing"]}

        response = client.post("/quiz/generate", json=body)

        assert response.status_code == 422

    def test_unparseable_output(self, make_client, fake_completion):
        """Resposta sem questoes validas retorna 422."""
        client = make_client(fake_completion("Sorry, I cannot help with that."))

        response = client.post("/quiz/generate", json=GENERATE_BODY)

        assert response.status_code == 422


class TestQuizEndpoints:
    """Testes de leitura, inicio e remocao do quiz."""

    def test_get_quiz(self, client):
        """GET /quiz/{id} retorna questoes em ordem."""
        quiz_id = _generate(client)

        response = client.get(f"/quiz/{quiz_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Biology Basics"
        assert data["document_ids"] == ["doc-1"]
        assert [q["ordinal"] for q in data["questions"]] == [1, 2, 3]

    def test_get_unknown_quiz(self, client):
        """Quiz inexistente retorna 404."""
        assert client.get("/quiz/nope").status_code == 404

    def test_start_quiz(self, client):
        """POST /start move para in_progress e e idempotente."""
        quiz_id = _generate(client)

        first = client.post(f"/quiz/{quiz_id}/start")
        second = client.post(f"/quiz/{quiz_id}/start")

        assert first.json()["status"] == "in_progress"
        assert second.status_code == 200

    def test_delete_quiz(self, client):
        """DELETE remove quiz; segunda remocao retorna 404."""
        quiz_id = _generate(client)

        assert client.delete(f"/quiz/{quiz_id}").status_code == 200
        assert client.get(f"/quiz/{quiz_id}").status_code == 404
        assert client.delete(f"/quiz/{quiz_id}").status_code == 404


class TestAnswerEndpoints:
    """Testes de submissao de respostas."""

    def test_mcq_answer(self, client):
        """MCQ correta ganha 1 ponto sem similaridade."""
        quiz_id = _generate(client)

        response = client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 1, "user_answer": "2"})

        assert response.status_code == 200
        data = response.json()
        assert data["is_correct"] is True
        assert data["marks_obtained"] == 1
        assert data["similarity_score"] is None
        assert data["evaluation_method"] == "exact"
        assert data["reference_answer"] == "4"

    def test_saq_answer(self, client):
        """SAQ avaliada pelo servico de completion."""
        quiz_id = _generate(client)

        response = client.post(
            "/quiz/answer",
            json={"quiz_id": quiz_id, "question_id": 2, "user_answer": "Glucose and oxygen"},
        )

        data = response.json()
        assert data["is_correct"] is True
        assert data["marks_obtained"] == 3
        assert data["similarity_score"] == 92
        assert data["evaluation_method"] == "completion"

    def test_duplicate_answer(self, client):
        """Segunda resposta para a mesma questao retorna 409."""
        quiz_id = _generate(client)
        body = {"quiz_id": quiz_id, "question_id": 1, "user_answer": "2"}

        client.post("/quiz/answer", json=body)
        response = client.post("/quiz/answer", json=body)

        assert response.status_code == 409

    def test_unknown_question_and_quiz(self, client):
        """Questao ou quiz inexistente retorna 404."""
        quiz_id = _generate(client)

        unknown_question = client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 99, "user_answer": "x"})
        unknown_quiz = client.post("/quiz/answer", json={"quiz_id": "nope", "question_id": 1, "user_answer": "x"})

        assert unknown_question.status_code == 404
        assert unknown_quiz.status_code == 404

    def test_answer_status(self, client):
        """GET /answers/{qid} indica se a questao foi respondida."""
        quiz_id = _generate(client)

        before = client.get(f"/quiz/{quiz_id}/answers/1").json()
        client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 1, "user_answer": "3"})
        after = client.get(f"/quiz/{quiz_id}/answers/1").json()

        assert before["answered"] is False
        assert after["answered"] is True
        assert after["answer"]["is_correct"] is False

    def test_batch(self, client):
        """Lote avalia todas as respostas em ordem."""
        quiz_id = _generate(client)
        body = {
            "quiz_id": quiz_id,
            "answers": [
                {"question_id": 1, "user_answer": "2"},
                {"question_id": 2, "user_answer": "Glucose"},
                {"question_id": 3, "user_answer": "Evaporation and rain"},
            ],
        }

        response = client.post("/quiz/answers/batch", json=body)

        assert response.status_code == 200
        assert [a["marks_obtained"] for a in response.json()] == [1, 3, 5]

    def test_batch_duplicate(self, client):
        """Lote com questao repetida retorna 409 sem persistir nada."""
        quiz_id = _generate(client)
        body = {
            "quiz_id": quiz_id,
            "answers": [{"question_id": 1, "user_answer": "2"}, {"question_id": 1, "user_answer": "3"}],
        }

        response = client.post("/quiz/answers/batch", json=body)

        assert response.status_code == 409
        assert client.get(f"/quiz/{quiz_id}/answers/1").json()["answered"] is False


class TestCompletionEndpoints:
    """Testes de conclusao, resultados e estatisticas."""

    def test_complete_and_results(self, client):
        """Conclusao congela pontos e percentual."""
        quiz_id = _generate(client)
        client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 1, "user_answer": "2"})

        response = client.post(f"/quiz/{quiz_id}/complete")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["marks_obtained"] == 1
        assert data["percentage"] == 11
        assert data["breakdown"]["mcq"]["correct"] == 1
        assert client.get(f"/quiz/{quiz_id}/results").json()["percentage"] == 11

    def test_answer_after_completion(self, client):
        """Resposta apos conclusao retorna 409."""
        quiz_id = _generate(client)
        client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 1, "user_answer": "2"})
        client.post(f"/quiz/{quiz_id}/complete")

        response = client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 2, "user_answer": "x"})

        assert response.status_code == 409

    def test_complete_ready_quiz_conflict(self, client):
        """Concluir sem tentativa iniciada retorna 409."""
        quiz_id = _generate(client)

        assert client.post(f"/quiz/{quiz_id}/complete").status_code == 409

    def test_list_stats_recent(self, client):
        """Listagem, estatisticas e desempenho recente."""
        quiz_id = _generate(client)
        _generate(client)
        client.post("/quiz/answer", json={"quiz_id": quiz_id, "question_id": 1, "user_answer": "2"})
        client.post(f"/quiz/{quiz_id}/complete")

        listing = client.get("/quiz/list").json()
        stats = client.get("/quiz/stats").json()
        recent = client.get("/quiz/recent").json()

        assert len(listing) == 2
        assert stats["total_quizzes"] == 2
        assert stats["total_questions_attempted"] == 1
        assert stats["average_percentage"] == 11.0
        assert stats["total_marks_obtained"] == 1
        assert stats["total_possible_marks"] == 9
        assert [r["quiz_id"] for r in recent] == [quiz_id]
