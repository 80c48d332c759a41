"""Quiz Scoring Engine - Motor de pontuacao e agregacao."""

import math

from ..models.enums import QuestionType
from ..models.schemas import QUESTION_MARKS, Answer, Question


def round_half_up(value: float) -> int:
    """Arredonda para o inteiro mais proximo (0.5 sobe).

    Example:
        >>> round_half_up(62.5)
        63
    """
    return int(math.floor(value + 0.5))


class QuizScoringEngine:
    """Motor de pontuacao para quizzes.

    A pontuacao de cada questao e fixa pelo tipo e nunca definida
    independentemente.

    Pontuacao por tipo:
        - MCQ: 1 ponto
        - SAQ: 3 pontos
        - LAQ: 5 pontos

    Example:
        >>> engine = QuizScoringEngine()
        >>> engine.calculate_percentage(7, 9)
        78
    """

    MARKS = QUESTION_MARKS

    def get_marks_for_type(self, question_type: QuestionType) -> int:
        """Retorna pontos para um tipo de questao.

        Args:
            question_type: Tipo da questao

        Returns:
            Pontos correspondentes (1, 3 ou 5)
        """
        return self.MARKS[question_type]

    def total_marks(self, questions: list[Question]) -> int:
        """Soma da pontuacao maxima das questoes."""
        return sum(self.get_marks_for_type(q.question_type) for q in questions)

    def sum_marks(self, answers: list[Answer]) -> int:
        """Soma dos pontos obtidos nas respostas persistidas."""
        return sum(a.marks_obtained for a in answers)

    def calculate_percentage(self, marks_obtained: int, total_marks: int) -> int:
        """Percentual inteiro de aproveitamento.

        Raises:
            ValueError: Se total_marks nao for positivo
        """
        if total_marks <= 0:
            raise ValueError("total_marks deve ser positivo")
        return round_half_up(100 * marks_obtained / total_marks)

    def calculate_breakdown(
        self, questions: list[Question], answers: list[Answer]
    ) -> dict[str, dict[str, int]]:
        """Analise por tipo de questao.

        Args:
            questions: Questoes do quiz
            answers: Respostas persistidas (questoes sem resposta contam como erradas)

        Returns:
            Dict tipo -> {correct, answered, total, marks_obtained, total_marks}
        """
        breakdown = {
            qtype.value: {"correct": 0, "answered": 0, "total": 0, "marks_obtained": 0, "total_marks": 0}
            for qtype in QuestionType
        }
        by_question = {a.question_id: a for a in answers}

        for question in questions:
            entry = breakdown[question.question_type.value]
            entry["total"] += 1
            entry["total_marks"] += question.marks

            answer = by_question.get(question.ordinal)
            if answer is None:
                continue
            entry["answered"] += 1
            entry["marks_obtained"] += answer.marks_obtained
            if answer.is_correct:
                entry["correct"] += 1

        return breakdown
