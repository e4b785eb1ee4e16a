from __future__ import annotations

import logging

from flask import Flask

from seo_insight.adapters.gemini_invoker import GeminiModelInvoker
from seo_insight.config.ini_config import AppSettings, IniConfig
from seo_insight.services.keyword_analysis import KeywordAnalysisService
from seo_insight.services.url_normalization import SchemePrefixUrlNormalizer
from seo_insight.web.routes import create_blueprint

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
        root.addHandler(handler)
    root.setLevel(level)


def build_analysis_service(settings: AppSettings) -> KeywordAnalysisService:
    url_norm = SchemePrefixUrlNormalizer(default_scheme=settings.default_scheme)

    invoker = GeminiModelInvoker(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
    )

    return KeywordAnalysisService(
        model_invoker=invoker,
        url_normalizer=url_norm,
        keyword_count=settings.keyword_count,
        search_grounding=settings.search_grounding,
    )


def create_app(settings: AppSettings | None = None, analysis_service=None) -> Flask:
    if settings is None:
        settings = IniConfig.from_env_or_default().load_settings()

    configure_logging(settings.log_level)

    if analysis_service is None:
        analysis_service = build_analysis_service(settings)

    app = Flask(__name__)
    app.register_blueprint(create_blueprint(analysis_service))

    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug

    return app
