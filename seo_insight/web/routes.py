## routes.py
from __future__ import annotations

import io

from flask import Blueprint, abort, current_app, jsonify, redirect, render_template, request, send_file, url_for

from seo_insight.domain.models import AnalysisState
from seo_insight.renderers import csv_bytes, export_filename, xlsx_bytes
from seo_insight.services.prompt_builder import AnalysisStage

EXPORT_FORMATS = {
    "csv": (csv_bytes, "text/csv; charset=utf-8"),
    "xlsx": (xlsx_bytes, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
}

PROGRESS_MESSAGES = {
    AnalysisState.ANALYZING_CURRENT: "1/2 Analisi del traffico attuale tramite Google Search...",
    AnalysisState.ANALYZING_POTENTIAL: "2/2 Analisi competitor e gap di mercato in corso...",
}


def _parse_stage(raw: str) -> AnalysisStage | None:
    try:
        return AnalysisStage(raw)
    except ValueError:
        return None


def create_blueprint(analysis_service) -> Blueprint:
    bp = Blueprint("web", __name__)

    @bp.get("/")
    def index():
        state, run = analysis_service.snapshot()
        return render_template(
            "index.html",
            state=state,
            run=run,
            States=AnalysisState,
            progress_message=PROGRESS_MESSAGES.get(state),
            show_current=bool(run.current_keywords) or state in (AnalysisState.ANALYZING_POTENTIAL, AnalysisState.COMPLETE),
            show_potential=state == AnalysisState.COMPLETE and bool(run.potential_keywords),
        )

    @bp.post("/run")
    def run_analysis():
        url_raw = (request.form.get("url") or "").strip()
        started = analysis_service.submit_async(url_raw)
        current_app.logger.info("Submit url=%r started=%s", url_raw, started)
        return redirect(url_for("web.index"))

    @bp.get("/status")
    def status():
        state, run = analysis_service.snapshot()
        return jsonify(
            state=state.value,
            url=run.url,
            current_count=len(run.current_keywords),
            potential_count=len(run.potential_keywords),
            error=run.error,
        )

    @bp.get("/export/<stage>/<fmt>")
    def export(stage: str, fmt: str):
        parsed = _parse_stage(stage)
        if parsed is None or fmt not in EXPORT_FORMATS:
            abort(404)

        _, run = analysis_service.snapshot()
        records = run.current_keywords if parsed == AnalysisStage.CURRENT_TRAFFIC else run.potential_keywords
        if not records:
            abort(404)

        render, mimetype = EXPORT_FORMATS[fmt]
        filename = export_filename(parsed, fmt)
        current_app.logger.info("Export stage=%s format=%s rows=%d", parsed.value, fmt, len(records))
        return send_file(
            io.BytesIO(render(records)),
            mimetype=mimetype,
            as_attachment=True,
            download_name=filename,
        )

    return bp
