from __future__ import annotations


class PartnerMatchError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(PartnerMatchError):
    pass


class ParseError(PartnerMatchError):
    pass
