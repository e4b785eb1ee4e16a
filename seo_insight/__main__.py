from seo_insight.app_factory import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])

#############################
#
# Key design patterns used
# •	Application Factory: create_app() builds the app and wires dependencies.
# •	Service Layer: KeywordAnalysisService owns the run and its state machine.
# •	Port/Adapter: ModelInvoker is the port, GeminiModelInvoker the google-genai adapter.
# •	Strategy: UrlNormalizer allows you to swap normalization logic.
######################################################################
# Runtime request flow
# •	GET /            renders index.html from the current (state, run) snapshot
# •	POST /run        submit_async(url): stage 1 (current traffic), then stage 2 (potential gap)
# •	GET /status      JSON progress for polling
# •	GET /export/<stage>/<csv|xlsx>  downloads the records of one stage
