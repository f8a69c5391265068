"""RIS reference type codes.

The value of the ``TY`` tag must be one of these codes.
Reference: https://en.wikipedia.org/wiki/RIS_(file_format)#Type_of_reference
"""

from enum import StrEnum

__all__ = ["RisType"]


class RisType(StrEnum):
    """Closed enumeration of valid RIS reference types.

    Each member's value is the code written after ``TY  - ``;
    ``description`` holds the human-readable name.
    """

    description: str

    def __new__(cls, code: str, description: str) -> "RisType":
        obj = str.__new__(cls, code)
        obj._value_ = code
        obj.description = description
        return obj

    ABST = ("ABST", "Abstract")
    ADVS = ("ADVS", "Audiovisual material")
    AGGR = ("AGGR", "Aggregated Database")
    ANCIENT = ("ANCIENT", "Ancient Text")
    ART = ("ART", "Art Work")
    BILL = ("BILL", "Bill")
    BLOG = ("BLOG", "Blog")
    BOOK = ("BOOK", "Whole book")
    CASE = ("CASE", "Case")
    CHAP = ("CHAP", "Book chapter")
    CHART = ("CHART", "Chart")
    CLSWK = ("CLSWK", "Classical Work")
    COMP = ("COMP", "Computer program")
    CONF = ("CONF", "Conference proceeding")
    CPAPER = ("CPAPER", "Conference paper")
    CTLG = ("CTLG", "Catalog")
    DATA = ("DATA", "Data file")
    DBASE = ("DBASE", "Online Database")
    DICT = ("DICT", "Dictionary")
    EBOOK = ("EBOOK", "Electronic Book")
    ECHAP = ("ECHAP", "Electronic Book Section")
    EDBOOK = ("EDBOOK", "Edited Book")
    EJOUR = ("EJOUR", "Electronic Article")
    ELEC = ("ELEC", "Web Page")
    ENCYC = ("ENCYC", "Encyclopedia")
    EQUA = ("EQUA", "Equation")
    FIGURE = ("FIGURE", "Figure")
    GEN = ("GEN", "Generic")
    GOVDOC = ("GOVDOC", "Government Document")
    GRANT = ("GRANT", "Grant")
    HEAR = ("HEAR", "Hearing")
    ICOMM = ("ICOMM", "Internet Communication")
    INPR = ("INPR", "In Press")
    JFULL = ("JFULL", "Journal (full)")
    JOUR = ("JOUR", "Journal")
    LEGAL = ("LEGAL", "Legal Rule or Regulation")
    MANSCPT = ("MANSCPT", "Manuscript")
    MAP = ("MAP", "Map")
    MGZN = ("MGZN", "Magazine article")
    MPCT = ("MPCT", "Motion picture")
    MULTI = ("MULTI", "Online Multimedia")
    MUSIC = ("MUSIC", "Music score")
    NEWS = ("NEWS", "Newspaper")
    PAMP = ("PAMP", "Pamphlet")
    PAT = ("PAT", "Patent")
    PCOMM = ("PCOMM", "Personal communication")
    RPRT = ("RPRT", "Report")
    SER = ("SER", "Serial publication")
    SLIDE = ("SLIDE", "Slide")
    SOUND = ("SOUND", "Sound recording")
    STAND = ("STAND", "Standard")
    STAT = ("STAT", "Statute")
    THES = ("THES", "Thesis/Dissertation")
    UNBILL = ("UNBILL", "Unenacted Bill")
    UNPB = ("UNPB", "Unpublished work")
    VIDEO = ("VIDEO", "Video recording")

    @property
    def code(self) -> str:
        """Return the RIS code of this type."""
        return self.value

    @classmethod
    def from_code(cls, code: str | None) -> "RisType | None":
        """Look up a type by its RIS code.

        Parameters
        ----------
        code : str | None
            Value found after ``TY  - ``. Surrounding whitespace is ignored.

        Returns
        -------
        RisType | None
            Matching type, or None when the code is absent or unrecognized.
        """
        if code is None:
            return None
        try:
            return cls(code.strip())
        except ValueError:
            return None
