from __future__ import annotations

from enum import Enum


class AnalysisStage(str, Enum):
    CURRENT_TRAFFIC = "current"
    POTENTIAL_GAP = "potential"


# Shared by both stages so the response extractor stays stage-agnostic.
JSON_OUTPUT_INSTRUCTIONS = (
    "OUTPUT:\n"
    "Devi restituire SOLO un array JSON valido. Non aggiungere testo prima o dopo.\n"
    "Ogni elemento dell'array deve essere un oggetto con esattamente questi campi stringa:\n"
    "[\n"
    "  {\n"
    '    "keyword": "...",\n'
    '    "metric": "...",\n'
    '    "details": "..."\n'
    "  }\n"
    "]"
)


def _current_traffic_instructions(url: str, keyword_count: int) -> str:
    return (
        f"Sei un analista SEO tecnico esperto. Il tuo compito è analizzare il dominio: {url}.\n"
        "\n"
        'ISTRUZIONI CRITICHE DI "GROUNDING" (VERIFICA DEL CONTESTO):\n'
        "1. Prima di estrarre qualsiasi keyword, usa Google Search per determinare con certezza "
        "il settore di attività di questa azienda specifica.\n"
        '2. Cerca la pagina "Chi siamo" o la "Home" per leggere la mission aziendale.\n'
        "3. Non confondere questa azienda con altre che hanno nomi simili ma operano in settori diversi. "
        "Basati ESCLUSIVAMENTE sui servizi reali trovati sul sito.\n"
        "\n"
        "TASK:\n"
        f"Una volta identificato il settore, stima le {keyword_count} keyword principali "
        "che portano traffico organico qualificato a questo sito.\n"
        "\n"
        "CAMPI:\n"
        '- "keyword": la parola chiave reale.\n'
        '- "metric": Traffico Stimato (Alto/Medio/Basso).\n'
        "- \"details\": motivo della rilevanza (es. 'Servizio core identificato in home', "
        "'Blog post su normativa X').\n"
    )


def _potential_gap_instructions(url: str, keyword_count: int) -> str:
    return (
        "Agisci come un Senior SEO Strategist specializzato in analisi dei competitor.\n"
        f"Sito in analisi: {url}.\n"
        "\n"
        "FASE 1: IDENTIFICAZIONE SETTORE E COMPETITOR\n"
        "Usa Google Search per:\n"
        "1. Confermare il settore esatto (es. Governance Risk & Compliance, Cybersecurity, Retail).\n"
        "2. Identificare 2-3 competitor diretti reali e autorevoli per questo settore.\n"
        "\n"
        "FASE 2: GAP ANALYSIS\n"
        f'Identifica {keyword_count} "Keywords ad Alto Potenziale" che i competitor stanno usando '
        "o che sono trend emergenti nel settore, ma che questo sito non sta ancora coprendo adeguatamente.\n"
        "\n"
        "CRITERI:\n"
        "- Se il sito è B2B, privilegia keyword transazionali o informative professionali.\n"
        "- Evita keyword troppo generiche o consumer se l'azienda è B2B.\n"
        "- Le keyword devono essere opportunità concrete di business.\n"
        "\n"
        "CAMPI:\n"
        '- "keyword": la keyword opportunità.\n'
        '- "metric": Potenziale (Alto/Molto Alto).\n'
        "- \"details\": strategia (es. 'Usata dal competitor X', 'Gap normativo', "
        "'Domanda crescente nel settore').\n"
    )


_STAGE_INSTRUCTIONS = {
    AnalysisStage.CURRENT_TRAFFIC: _current_traffic_instructions,
    AnalysisStage.POTENTIAL_GAP: _potential_gap_instructions,
}


def build_prompt(stage: AnalysisStage, url: str, keyword_count: int = 20) -> str:
    """Pure string construction: stage framing + the shared JSON output contract."""
    body = _STAGE_INSTRUCTIONS[AnalysisStage(stage)](url, keyword_count)
    return body + "\n" + JSON_OUTPUT_INSTRUCTIONS
