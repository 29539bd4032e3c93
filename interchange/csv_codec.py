"""
Interchange Codec Module
Encodes entity collections to delimited text and decodes them back
Rows that cannot be decoded are dropped, never fatal to the whole file

Decoding restores flags and grade fields exactly as written; it does not
re-check enrollment uniqueness or the credit cap, so an imported snapshot
may hold data the rule engine would have refused.
"""

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import config
from models.enums import Semester, Department, Grade
from models.entities import PersonInfo, Student, Course, Enrollment
from errors import MalformedRecordError


LINE_BREAKS = ("\n", "\r")

# Encoded fields are unbounded, so decoding must accept whatever encode wrote
if csv.field_size_limit() < config.CSV_FIELD_SIZE_LIMIT:
    csv.field_size_limit(config.CSV_FIELD_SIZE_LIMIT)


# ===========================
# FIELD ENCODING
# ===========================

def escape_field(value: Optional[str]) -> str:
    """
    Quote a field if it holds the delimiter, the quote character or a line break

    Internal quote characters are doubled; None encodes as an empty field.
    """
    if value is None:
        return ""

    text = str(value)
    specials = (config.CSV_DELIMITER, config.CSV_QUOTE) + LINE_BREAKS

    if any(ch in text for ch in specials):
        quote = config.CSV_QUOTE
        return quote + text.replace(quote, quote * 2) + quote

    return text


def encode_row(fields: Sequence[Optional[str]]) -> str:
    return config.CSV_DELIMITER.join(escape_field(field) for field in fields)


def _is_blank(fields: List[str]) -> bool:
    return not fields or (len(fields) == 1 and not fields[0].strip())


@dataclass(frozen=True)
class SourceRow:
    """One parsed row and where it sits in the text"""
    line_number: int
    line_count: int
    fields: List[str]
    error: Optional[str] = None


class RowScanner:
    """
    Parse delimited text into rows of fields

    Quoted fields may contain delimiters, doubled quotes and line breaks.
    A stray quote makes the parser swallow every following line into one
    field; after such a row the caller calls resync() and parsing restarts
    on the row's second physical line, so only the bad line is lost.
    """

    def __init__(self, text: str):
        # Split only on \n, \r and \r\n, as the csv module expects
        self._lines = io.StringIO(text, newline='').readlines()
        self._position = 0
        self._last: Optional[SourceRow] = None

    def __iter__(self):
        return self

    def __next__(self) -> SourceRow:
        lines = self._lines

        while self._position < len(lines):
            start = self._position
            reader = csv.reader(
                (lines[i] for i in range(start, len(lines))),
                delimiter=config.CSV_DELIMITER,
                quotechar=config.CSV_QUOTE,
                doublequote=True
            )

            try:
                fields, error = next(reader), None
            except csv.Error as e:
                fields, error = [], str(e)

            consumed = max(reader.line_num, 1)
            self._position = start + consumed

            if error is None and _is_blank(fields):
                continue

            self._last = SourceRow(start + 1, consumed, fields, error)
            return self._last

        raise StopIteration

    def resync(self) -> int:
        """
        Re-read the last row's lines after its first one as separate rows

        Returns:
            Number of lines handed back to the parser (0 for a one-line row)
        """
        row, self._last = self._last, None
        if row is None or row.line_count < 2:
            return 0

        # line_number is 1-based, so it indexes the row's second line
        self._position = row.line_number
        return row.line_count - 1


def split_rows(text: str) -> Iterator[Tuple[int, List[str]]]:
    """
    Yields:
        (line number, fields) for every non-blank, parsable row
    """
    for row in RowScanner(text):
        if row.error is None:
            yield row.line_number, row.fields


def _format_date(value: Optional[date]) -> str:
    # isoformat pads the year to four digits, which strftime does not
    return value.isoformat() if value else ""


def _parse_date(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None
    return date.fromisoformat(text)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(text: str) -> bool:
    return text.strip().lower() == "true"


def _require_id(text: str, name: str) -> str:
    if not text.strip():
        raise ValueError(f"missing {name}")
    return text


# ===========================
# STUDENT ROWS
# ===========================

def _encode_student(student: Student) -> List[str]:
    return [
        student.id,
        student.registration_number,
        student.person.full_name,
        student.person.email,
        _format_date(student.person.date_of_birth),
        student.person.phone_number,
        _format_date(student.enrollment_date),
        _format_bool(student.active),
        repr(float(student.current_gpa)),
    ]


def _decode_student(fields: List[str]) -> Student:
    gpa_text = fields[8].strip() if len(fields) > 8 else ""

    return Student(
        id=_require_id(fields[0], "student id"),
        registration_number=fields[1],
        person=PersonInfo(
            full_name=fields[2],
            email=fields[3],
            date_of_birth=_parse_date(fields[4]),
            phone_number=fields[5] or None
        ),
        enrollment_date=_parse_date(fields[6]) or date.today(),
        active=_parse_bool(fields[7]),
        current_gpa=float(gpa_text) if gpa_text else 0.0
    )


# ===========================
# COURSE ROWS
# ===========================

def _encode_course(course: Course) -> List[str]:
    return [
        course.id,
        course.code,
        course.title,
        str(course.credit_hours),
        course.instructor_id,
        course.semester.name,
        course.department.name,
        course.description,
        _format_bool(course.active),
    ]


def _decode_course(fields: List[str]) -> Course:
    credit_hours = int(fields[3])
    if credit_hours <= 0:
        raise ValueError(f"credit hours must be positive, got {credit_hours}")

    return Course(
        id=_require_id(fields[0], "course id"),
        code=fields[1],
        title=fields[2],
        credit_hours=credit_hours,
        instructor_id=fields[4] or None,
        semester=Semester[fields[5].strip()],
        department=Department[fields[6].strip()],
        description=fields[7] or None,
        active=_parse_bool(fields[8]) if len(fields) > 8 else True
    )


# ===========================
# ENROLLMENT ROWS
# ===========================

def _encode_enrollment(enrollment: Enrollment) -> List[str]:
    return [
        enrollment.id,
        enrollment.student_id,
        enrollment.course_id,
        _format_date(enrollment.enrollment_date),
        _format_date(enrollment.completion_date),
        repr(float(enrollment.numeric_grade)),
        enrollment.letter_grade.name if enrollment.letter_grade else "",
        _format_bool(enrollment.completed),
        _format_bool(enrollment.active),
    ]


def _decode_enrollment(fields: List[str]) -> Enrollment:
    grade_text = fields[5].strip()
    letter_text = fields[6].strip() if len(fields) > 6 else ""

    return Enrollment(
        id=_require_id(fields[0], "enrollment id"),
        student_id=_require_id(fields[1], "student id"),
        course_id=_require_id(fields[2], "course id"),
        enrollment_date=_parse_date(fields[3]) or date.today(),
        completion_date=_parse_date(fields[4]),
        numeric_grade=float(grade_text) if grade_text else 0.0,
        letter_grade=Grade[letter_text] if letter_text else None,
        completed=_parse_bool(fields[7]) if len(fields) > 7 else False,
        active=_parse_bool(fields[8]) if len(fields) > 8 else True
    )


@dataclass(frozen=True)
class RecordFormat:
    """Column layout of one entity type"""
    kind: str
    header: Tuple[str, ...]
    min_columns: int
    encode: Callable[[object], List[str]]
    decode: Callable[[List[str]], object]


FORMATS: Dict[type, RecordFormat] = {
    Student: RecordFormat(
        "Student", config.STUDENT_HEADER, config.STUDENT_MIN_COLUMNS,
        _encode_student, _decode_student
    ),
    Course: RecordFormat(
        "Course", config.COURSE_HEADER, config.COURSE_MIN_COLUMNS,
        _encode_course, _decode_course
    ),
    Enrollment: RecordFormat(
        "Enrollment", config.ENROLLMENT_HEADER, config.ENROLLMENT_MIN_COLUMNS,
        _encode_enrollment, _decode_enrollment
    ),
}


def format_for(entity_type: type) -> RecordFormat:
    try:
        return FORMATS[entity_type]
    except KeyError:
        raise TypeError(f"No interchange format for {entity_type.__name__}") from None


def decode_row(record_format: RecordFormat, fields: List[str]):
    """
    Decode one row

    Raises:
        MalformedRecordError: Too few columns or an unparsable value
    """
    if len(fields) < record_format.min_columns:
        raise MalformedRecordError(
            record_format.kind, fields,
            f"expected at least {record_format.min_columns} columns, got {len(fields)}"
        )

    try:
        return record_format.decode(fields)
    except (ValueError, KeyError) as e:
        raise MalformedRecordError(record_format.kind, fields, str(e)) from e


class CsvCodec:
    """
    Text codec for entity collections
    Tracks how many rows were dropped while decoding
    """

    def __init__(self):
        self.rows_encoded = 0
        self.rows_decoded = 0
        self.rows_dropped = 0

        self._setup_logging()

    def _setup_logging(self):
        """Setup interchange logging"""
        self.logger = logging.getLogger('Interchange')
        self.logger.setLevel(config.LOG_LEVEL)

        if config.LOG_TO_FILE and not self.logger.handlers:
            handler = logging.FileHandler(config.INTERCHANGE_LOG)
            formatter = logging.Formatter(
                config.LOG_FORMAT,
                datefmt=config.LOG_DATE_FORMAT
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def encode(self, entity_type: type, records: Sequence) -> str:
        """
        Encode records as header line plus one row per record

        Args:
            entity_type: Student, Course or Enrollment
            records: Records of that type

        Returns:
            Text with a trailing line break
        """
        record_format = format_for(entity_type)

        lines = [encode_row(record_format.header)]
        lines.extend(encode_row(record_format.encode(record)) for record in records)

        self.rows_encoded += len(records)
        return "\n".join(lines) + "\n"

    def decode(self, entity_type: type, text: str) -> List:
        """
        Decode text produced by encode (or edited by hand)

        The first non-blank row is the header. Malformed rows are logged
        and skipped; a malformed row spanning several lines loses only its
        first line and the rest are read again.

        Returns:
            Decoded records in file order
        """
        record_format = format_for(entity_type)
        records = []
        header_seen = False
        scanner = RowScanner(text)

        for row in scanner:
            if not header_seen:
                header_seen = True
                # Headers never hold line breaks
                if row.line_count > 1 or row.error:
                    self.logger.warning(f"Header at line {row.line_number} is malformed")
                    scanner.resync()
                continue

            try:
                if row.error:
                    raise MalformedRecordError(record_format.kind, row.fields, row.error)
                records.append(decode_row(record_format, row.fields))
            except MalformedRecordError as e:
                self.rows_dropped += 1
                self.logger.warning(f"Row at line {row.line_number} dropped: {e}")

                reread = scanner.resync()
                if reread:
                    self.logger.warning(
                        f"Re-reading {reread} lines after line {row.line_number} as separate rows"
                    )

        self.rows_decoded += len(records)
        return records

    def get_statistics(self) -> Dict:
        """Get codec statistics"""
        return {
            'rows_encoded': self.rows_encoded,
            'rows_decoded': self.rows_decoded,
            'rows_dropped': self.rows_dropped,
        }
