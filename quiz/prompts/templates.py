"""Quiz Templates - Prompts e constantes para geracao e avaliacao."""

# =============================================================================
# LIMITES
# =============================================================================

# Caracteres de conteudo enviados no prompt de geracao
MAX_CONTENT_LENGTH = 3000
TRUNCATION_MARKER = "..."

# =============================================================================
# GERACAO DE QUESTOES
# =============================================================================

# Gramatica exigida na resposta (o parser depende exatamente destes marcadores)
OUTPUT_GRAMMAR = """For MCQs, use this exact format:
MCQ: <question text>
Options: 1) <option 1> 2) <option 2> 3) <option 3> 4) <option 4>
Answer: <correct option number>
Explanation: <detailed explanation>

For SAQs, use this exact format:
SAQ: <question text>
Answer: <correct answer>
Explanation: <detailed explanation>

For LAQs, use this exact format:
LAQ: <question text>
Answer: <correct answer>
Explanation: <detailed explanation>"""

QUIZ_GENERATION_PROMPT = """You are an expert quiz generator. Based on the following educational content, generate quiz questions according to the specified requirements.

CONTENT:
{content}

REQUIREMENTS:
- Difficulty Level: {difficulty}
- Generate exactly {mcq_count} Multiple Choice Questions (MCQs)
- Generate exactly {saq_count} Short Answer Questions (SAQs)
- Generate exactly {laq_count} Long Answer Questions (LAQs)

FORMAT REQUIREMENTS:
{grammar}

IMPORTANT:
- Questions should be appropriate for {difficulty} difficulty level
- MCQs should have exactly 4 options each, all on the Options line
- Questions should test understanding, not just memorization
- Answers should be comprehensive and educational
- Ensure questions are directly related to the provided content
- Start every question line with its marker (MCQ:, SAQ: or LAQ:) and do not number the questions
- Keep each field on a single line

Generate the questions now:"""

# =============================================================================
# AVALIACAO DE SIMILARIDADE
# =============================================================================

SIMILARITY_PROMPT = """You are an expert educational evaluator. Your task is to evaluate how similar a student's answer is to the correct answer for a given question.

QUESTION: {question}

CORRECT ANSWER: {reference_answer}

STUDENT'S ANSWER: {user_answer}

EVALUATION CRITERIA:
- Consider conceptual understanding, not just exact wording
- Account for different ways of expressing the same concept
- Look for key points and main ideas
- Ignore minor grammatical differences
- Consider if the student demonstrates understanding of the core concept

REQUIRED OUTPUT FORMAT:
Similarity Score: [0-100]
Explanation: [Brief explanation of your evaluation]
Is Correct: [YES/NO based on {threshold}% threshold]

Evaluate the student's answer now:"""
