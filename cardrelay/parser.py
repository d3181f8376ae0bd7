import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


# =========================
# DATA MODEL
# =========================

@dataclass
class ContactRecord:
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "company": self.company,
            "phone": self.phone,
            "email": self.email,
            "website": self.website,
        }

    def is_empty(self) -> bool:
        return not any(self.to_dict().values())


# =========================
# PARSER
# =========================

class ContactParser:
    """Heuristic parser turning business card OCR text into a ContactRecord."""

    PATTERNS = {
        "email": re.compile(r"\S+@\S+\.\S+"),
        "phone": re.compile(r"\+?[0-9][0-9\s\-()]{6,}"),
        "website": re.compile(r"www\.|https?://", re.IGNORECASE),
    }

    # Job titles never count as a name or a company
    ROLE_TITLES = (
        "geschäftsführer",
        "ceo",
        "manager",
        "director",
        "founder",
        "owner",
        "sales",
        "marketing",
    )

    ADDRESS_INDICATORS = (
        "straße",
        "str.",
        "platz",
        "road",
        "street",
        "ave",
        "blvd",
        "münster",
        "berlin",
        "deutschland",
        "germany",
    )

    # =========================
    # PUBLIC API
    # =========================

    def parse(self, text: Optional[str]) -> ContactRecord:
        if not text:
            return ContactRecord()

        lines = self.split_lines(text)
        logger.debug(f"Parsing {len(lines)} lines")

        email = self._first_match(lines, "email")
        phone = self._first_match(lines, "phone")
        website = self._first_match(lines, "website")
        first_name, last_name = self._extract_name(lines)
        company = self._extract_company(lines, first_name)

        return ContactRecord(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            company=company.strip(),
            phone=phone.strip(),
            email=email.strip(),
            website=website.strip(),
        )

    @staticmethod
    def split_lines(text: str) -> List[str]:
        return [l.strip() for l in text.split("\n") if l.strip()]

    # =========================
    # FIELD EXTRACTORS
    # =========================

    def _first_match(self, lines: List[str], kind: str) -> str:
        pattern = self.PATTERNS[kind]
        return next((l for l in lines if pattern.search(l)), "")

    def _extract_name(self, lines: List[str]) -> Tuple[str, str]:
        candidates = [
            l for l in lines
            if not self._is_contact_line(l) and not self._has_role_title(l)
        ]
        if not candidates:
            return "", ""

        parts = candidates[0].split()
        if len(parts) >= 2:
            return parts[0], " ".join(parts[1:])
        return parts[0], ""

    def _extract_company(self, lines: List[str], first_name: str) -> str:
        for line in lines:
            if not line:
                continue
            if first_name and first_name in line:
                continue
            if self._is_contact_line(line):
                continue
            if self._has_role_title(line) or self._has_address_indicator(line):
                continue
            return line
        return ""

    # =========================
    # LINE CLASSIFIERS
    # =========================

    def _is_contact_line(self, line: str) -> bool:
        """True for lines shaped like an email, website or phone number."""
        return any(
            self.PATTERNS[kind].search(line)
            for kind in ("email", "website", "phone")
        )

    def _has_role_title(self, line: str) -> bool:
        low = line.lower()
        return any(term in low for term in self.ROLE_TITLES)

    def _has_address_indicator(self, line: str) -> bool:
        low = line.lower()
        return any(term in low for term in self.ADDRESS_INDICATORS)


_default_parser = ContactParser()


def parse_card_text(text: Optional[str]) -> ContactRecord:
    """Parse OCR text with the shared stateless parser."""
    return _default_parser.parse(text)
