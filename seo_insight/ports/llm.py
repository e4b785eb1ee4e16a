class ModelInvoker:
    """Port for the text-completion collaborator."""
    def invoke(self, prompt: str, enable_search_grounding: bool = True) -> str:
        raise NotImplementedError
