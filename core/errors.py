"""
Error kinds raised while turning a document into a study pack.
Transport errors from the Groq SDK are not wrapped here.
"""


class StudyPackError(Exception):
    code = "study_pack_error"
    default_message = "Something went wrong while building your study pack."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EmptyDocument(StudyPackError):
    code = "empty_document"
    default_message = "Document appears to be empty."


class ExtractionFailed(StudyPackError):
    code = "extraction_failed"
    default_message = "Could not read text from this document."


class ResponseMalformed(StudyPackError):
    code = "response_malformed"
    default_message = (
        "I had trouble structuring those notes. "
        "Please try pasting shorter content or checking the text quality."
    )
