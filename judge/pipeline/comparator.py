class ResultComparator:
    """Exact comparison of program output after trimming and line-ending normalization."""

    @staticmethod
    def normalize(text: str | None) -> str:
        if text is None:
            return ''
        return text.replace('\r\n', '\n').replace('\r', '\n').strip()

    def equivalent(self, actual: str | None, expected: str | None) -> bool:
        return self.normalize(actual) == self.normalize(expected)
