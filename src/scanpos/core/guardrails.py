"""Sanitização da leitura do scanner antes da decodificação."""
import re

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

def sanitize_payload(text: str | None) -> str:
    """Remove caracteres de controle e espaços/quebras nas bordas.

    Leitores costumam anexar CR/LF ao final; o miolo do payload é preservado
    para não alterar o nome do produto.
    """
    text = CONTROL_CHARS.sub("", text or "")
    return text.strip()
