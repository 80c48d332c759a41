# =============================================================================
# TESTES - Prompt Builder Module
# =============================================================================
# Testes unitarios para renderizacao dos prompts
# =============================================================================

import pytest


class TestTruncateContent:
    """Testes para truncamento do conteudo."""

    def test_short_content_unchanged(self):
        """Conteudo dentro do limite nao muda."""
        from quiz.prompts.builder import truncate_content

        assert truncate_content("abc", 10) == "abc"

    def test_exact_limit_unchanged(self):
        """Conteudo exatamente no limite nao recebe reticencias."""
        from quiz.prompts.builder import truncate_content

        assert truncate_content("a" * 3000) == "a" * 3000

    def test_long_content_truncated(self):
        """Corta pelo numero de caracteres e anexa '...'."""
        from quiz.prompts.builder import truncate_content

        result = truncate_content("a" * 3001)

        assert result == "a" * 3000 + "..."

    def test_invalid_inputs(self):
        """Entradas invalidas sao defeitos."""
        from quiz.prompts.builder import truncate_content

        with pytest.raises(TypeError):
            truncate_content(None)
        with pytest.raises(ValueError):
            truncate_content("abc", 0)


class TestGenerationPrompt:
    """Testes para o prompt de geracao."""

    def test_contains_counts_and_grammar(self, sample_config):
        """Contagens pedidas e gramatica de saida aparecem literalmente."""
        from quiz.prompts.builder import build_generation_prompt
        from quiz.prompts.templates import OUTPUT_GRAMMAR

        prompt = build_generation_prompt("Plants use light.", sample_config)

        assert "Plants use light." in prompt
        assert "Generate exactly 1 Multiple Choice Questions (MCQs)" in prompt
        assert "Generate exactly 1 Short Answer Questions (SAQs)" in prompt
        assert "Generate exactly 1 Long Answer Questions (LAQs)" in prompt
        assert "Difficulty Level: easy" in prompt
        assert OUTPUT_GRAMMAR in prompt

    def test_deterministic(self, sample_config):
        """Mesma entrada, mesmo prompt."""
        from quiz.prompts.builder import build_generation_prompt

        assert build_generation_prompt("x", sample_config) == build_generation_prompt("x", sample_config)

    def test_content_truncated(self, sample_config):
        """Conteudo longo e truncado antes da interpolacao."""
        from quiz.prompts.builder import build_generation_prompt

        prompt = build_generation_prompt("b" * 5000, sample_config, max_content_length=100)

        assert "b" * 100 + "..." in prompt
        assert "b" * 101 not in prompt

    def test_config_type_checked(self):
        """Config precisa ser QuizConfiguration."""
        from quiz.prompts.builder import build_generation_prompt

        with pytest.raises(TypeError):
            build_generation_prompt("x", {"name": "x", "mcq_count": 1})


class TestSimilarityPrompt:
    """Testes para o prompt de similaridade."""

    def test_contains_fields_and_threshold(self):
        """Questao, referencia, resposta e limite no prompt."""
        from quiz.prompts.builder import build_similarity_prompt

        prompt = build_similarity_prompt("user text", "reference text", "What is it?", 75)

        assert "QUESTION: What is it?" in prompt
        assert "CORRECT ANSWER: reference text" in prompt
        assert "STUDENT'S ANSWER: user text" in prompt
        assert "75% threshold" in prompt
        assert "Similarity Score:" in prompt
        assert "Is Correct:" in prompt

    def test_threshold_varies_without_template_change(self):
        """Limites diferentes geram prompts diferentes apenas no limite."""
        from quiz.prompts.builder import build_similarity_prompt

        saq = build_similarity_prompt("u", "r", "q", 90)
        laq = build_similarity_prompt("u", "r", "q", 75)

        assert saq.replace("90%", "75%") == laq

    @pytest.mark.parametrize("threshold", [-1, 101])
    def test_threshold_out_of_range(self, threshold):
        """Limite fora de 0..100 e rejeitado."""
        from quiz.prompts.builder import build_similarity_prompt

        with pytest.raises(ValueError):
            build_similarity_prompt("u", "r", "q", threshold)

    @pytest.mark.parametrize("args", [(None, "r", "q", 90), ("u", "r", "q", "90"), ("u", "r", "q", True)])
    def test_invalid_types(self, args):
        """Tipos invalidos levantam TypeError."""
        from quiz.prompts.builder import build_similarity_prompt

        with pytest.raises(TypeError):
            build_similarity_prompt(*args)
