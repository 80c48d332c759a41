"""Question Set Parser - Converte a resposta de geracao em questoes tipadas."""

import logging
import re
from dataclasses import dataclass, field

from ..models.enums import QuestionType
from ..models.schemas import OPTION_KEYS, Question, QuizConfiguration
from ..models.state import ParseState, QuestionDraft

logger = logging.getLogger(__name__)

# "N) texto" ancorado em fronteiras "digito )" para tolerar digitos no texto
OPTION_PATTERN = re.compile(r"(?<!\S)([1-4])\)\s*(.*?)(?=\s+[1-4]\)|\s*$)")
# Inicio de alternativa em fronteira de espaco
OPTION_START_PATTERN = r"(?<!\S){key}\)"
# Linha de alternativa isolada (modelo quebrou Options em varias linhas)
OPTION_LINE_PATTERN = re.compile(r"^[1-4]\)")
# Numero da opcao no inicio do campo Answer
ANSWER_NUMBER_PATTERN = re.compile(r"^(\d+)")

OPTIONS_PREFIX = "Options:"
ANSWER_PREFIX = "Answer:"
EXPLANATION_PREFIX = "Explanation:"


@dataclass
class ParseResult:
    """Resultado do parse.

    Attributes:
        questions: Questoes validas, ordinais 1..N em ordem de geracao
        requested: Total pedido na configuracao
        discarded: Questoes abertas mas descartadas pelo portao de validade
        counts: Questoes validas por tipo
    """

    questions: list[Question] = field(default_factory=list)
    requested: int = 0
    discarded: int = 0
    counts: dict[QuestionType, int] = field(default_factory=dict)

    @property
    def shortfall(self) -> bool:
        """True se vieram menos questoes validas que o pedido."""
        return len(self.questions) < self.requested

    @property
    def missing(self) -> int:
        return max(self.requested - len(self.questions), 0)


def parse_options(options_text: str) -> dict[str, str]:
    """Extrai pares "N) texto" (N = 1..4). A primeira ocorrencia de cada chave vence.

    Alternativas coladas ("1)A2)B3)C4)D") caem no parse sequencial 1..4.
    """
    options: dict[str, str] = {}
    for match in OPTION_PATTERN.finditer(options_text):
        key, text = match.group(1), match.group(2).strip()
        if text and key not in options:
            options[key] = text

    if len(options) < len(OPTION_KEYS):
        sequential = _parse_options_in_order(options_text)
        if len(sequential) > len(options):
            return sequential
    return options


def _find_option_start(options_text: str, key: str, position: int) -> int:
    match = re.compile(OPTION_START_PATTERN.format(key=key)).search(options_text, position)
    if match is not None:
        return match.start()
    return options_text.find(f"{key})", position)


def _parse_options_in_order(options_text: str) -> dict[str, str]:
    starts: list[tuple[str, int]] = []
    position = 0
    for key in OPTION_KEYS:
        index = _find_option_start(options_text, key, position)
        if index < 0:
            break
        starts.append((key, index))
        position = index + len(key) + 1

    options: dict[str, str] = {}
    for i, (key, index) in enumerate(starts):
        end = starts[i + 1][1] if i + 1 < len(starts) else len(options_text)
        text = options_text[index + len(key) + 1:end].strip()
        if text:
            options[key] = text
    return options


class QuestionSetParser:
    """Parser linha-a-linha da gramatica de geracao.

    Reconhece blocos por marcador (`MCQ:`, `SAQ:`, `LAQ:`), respeitando o
    limite configurado por tipo, e descarta questoes incompletas.

    Example:
        >>> parser = QuestionSetParser()
        >>> result = parser.parse(llm_text, config)
        >>> result.shortfall
        False
    """

    MARKERS = {qtype.marker: qtype for qtype in QuestionType}

    def parse(self, text: str, config: QuizConfiguration) -> ParseResult:
        """Converte texto bruto em questoes validas.

        Args:
            text: Resposta do servico de completion
            config: Configuracao original (limites por tipo)

        Returns:
            ParseResult com as questoes validas e indicadores de contagem
        """
        if not isinstance(text, str):
            raise TypeError("text deve ser str")

        state = ParseState()
        for line in self._lines(text):
            self._consume(state, line, config)
        state.flush()

        # Answer antes de Options: resolve o numero com as alternativas finais
        for draft in state.drafts:
            if draft.question_type == QuestionType.MCQ and draft.correct_option_number is None:
                self._apply_answer(draft, draft.reference_answer)

        valid = [draft for draft in state.drafts if draft.is_valid()]
        questions = [draft.to_question(ordinal) for ordinal, draft in enumerate(valid, start=1)]

        counts = {qtype: 0 for qtype in QuestionType}
        for question in questions:
            counts[question.question_type] += 1

        result = ParseResult(
            questions=questions,
            requested=config.total_questions,
            discarded=len(state.drafts) - len(valid),
            counts=counts,
        )

        if result.shortfall:
            logger.warning(
                f"Esperado {result.requested} questoes, obtidas {len(questions)} "
                f"(descartadas: {result.discarded})"
            )

        return result

    @staticmethod
    def _lines(text: str) -> list[str]:
        lines = []
        for raw in text.splitlines():
            line = raw.replace("**", "").strip()
            if line:
                lines.append(line)
        return lines

    def _consume(self, state: ParseState, line: str, config: QuizConfiguration) -> None:
        qtype = self._marker_type(line)
        if qtype is not None:
            if state.counts[qtype] < config.count_for(qtype):
                state.open(qtype, line[len(qtype.marker):].strip())
            elif state.current is not None:
                # Marcador acima do limite: vira corpo da questao aberta
                state.overflow = True
            return

        draft = state.current
        if draft is None or state.overflow:
            return

        if line.startswith(OPTIONS_PREFIX):
            if draft.question_type == QuestionType.MCQ:
                self._merge_options(draft, line[len(OPTIONS_PREFIX):])
        elif OPTION_LINE_PATTERN.match(line):
            if draft.question_type == QuestionType.MCQ:
                self._merge_options(draft, line)
        elif line.startswith(ANSWER_PREFIX):
            if not draft.reference_answer or self._awaits_option_number(draft):
                self._apply_answer(draft, line[len(ANSWER_PREFIX):].strip())
        elif line.startswith(EXPLANATION_PREFIX):
            if not draft.explanation:
                draft.explanation = line[len(EXPLANATION_PREFIX):].strip()

    def _marker_type(self, line: str) -> QuestionType | None:
        for marker, qtype in self.MARKERS.items():
            if line.startswith(marker):
                return qtype
        return None

    @staticmethod
    def _merge_options(draft: QuestionDraft, options_text: str) -> None:
        for key, value in parse_options(options_text).items():
            draft.options.setdefault(key, value)

    @staticmethod
    def _awaits_option_number(draft: QuestionDraft) -> bool:
        """MCQ com resposta degradada (sem numero) ainda aceita um Answer posterior."""
        return (
            draft.question_type == QuestionType.MCQ
            and draft.correct_option_number is None
            and ANSWER_NUMBER_PATTERN.match(draft.reference_answer) is None
        )

    @staticmethod
    def _apply_answer(draft: QuestionDraft, answer_text: str) -> None:
        if draft.question_type != QuestionType.MCQ:
            draft.reference_answer = answer_text
            return

        match = ANSWER_NUMBER_PATTERN.match(answer_text)
        if match is None:
            # Resposta degradada: guarda o texto bruto, sem numero de opcao
            draft.reference_answer = answer_text
            return

        number = match.group(1)
        if number in OPTION_KEYS and number in draft.options:
            draft.correct_option_number = int(number)
            draft.reference_answer = draft.options[number]
        else:
            draft.reference_answer = answer_text
