"""Prompt templates for the map, reduce and stuffing calls."""

SYSTEM_TEMPLATE = (
    "You are a helpful AI assistant.\n"
    "You are an AI assistant that helps people summarize information.\n"
    "Your name is {name}\n"
    "You should reply to the user's request with your name and also in the style of a {voice}."
)

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are an AI assistant that helps people summarize long documents. "
    "Keep a neutral tone, stay faithful to the source and do not add outside information."
)

BULLET_POINTS = 5

CHUNK_TEMPLATE = (
    "Please give me a concise summary of the following passage, covering its key points.\n"
    "TEXT:\n{text}\n---\nSUMMARY:"
)

CHUNK_WITH_CONTEXT_TEMPLATE = (
    "Taking the following context delimited by triple backquotes into consideration:\n"
    "```{context}```\n"
    "Write a concise summary of the following passage, covering its key points.\n"
    "TEXT:\n{text}\n---\nSUMMARY:"
)

FINAL_TEMPLATE = (
    "Taking the following partial summaries of one document into consideration, in the order given:\n"
    "```{context}```\n"
    "Write a summary with a short introduction, {bullet_points} bullet points of one sentence each, "
    "and a conclusion.\n---\nSUMMARY:"
)

CONDENSE_TEMPLATE = (
    "The following partial summaries cover consecutive parts of one document, in order:\n"
    "```{context}```\n"
    "Merge them into one concise summary that keeps their order and removes repetition.\n---\nSUMMARY:"
)

STUFF_TEMPLATE = (
    "Please provide a concise summary covering the key points of the following text.\n"
    "TEXT:\n{text}\n---\nSUMMARY:"
)


def system_instruction(name: str = "Gemini", voice: str = "literary critic") -> str:
    return SYSTEM_TEMPLATE.format(name=name, voice=voice)


def chunk_prompt(text: str) -> str:
    return CHUNK_TEMPLATE.format(text=text)


def chunk_with_context_prompt(context: str, text: str) -> str:
    return CHUNK_WITH_CONTEXT_TEMPLATE.format(context=context, text=text)


def final_prompt(context: str, bullet_points: int = BULLET_POINTS) -> str:
    return FINAL_TEMPLATE.format(context=context, bullet_points=bullet_points)


def condense_prompt(context: str) -> str:
    return CONDENSE_TEMPLATE.format(context=context)


def stuff_prompt(text: str) -> str:
    return STUFF_TEMPLATE.format(text=text)
