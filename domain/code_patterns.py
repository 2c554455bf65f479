"""
Canned analyses for two well-known bug shapes.

These are substring and regex heuristics, not a parser: unrelated code that
happens to contain the trigger substrings gets the canned answer, and the same
bug phrased differently is missed.
"""

from __future__ import annotations

import re
from typing import Optional

from .search import CodeAnalysis

_PRICE_INDEXING = ("item['price']", 'item["price"]')
_PRICE_MARKERS = ("price", "item[", "for", "in", "total", "def calculate_total", "TypeError")

_STRING_PLUS_NUMBER = re.compile(r"[\"'].*?\+.*?\d")
_QUOTED_OPERAND = re.compile(r"[\"'](\d+)[\"']\s*\+\s*(\d+)")
_PLACEHOLDER = re.compile(r"\{(language|code|fixed|alternatives)\}")

# The print line references `totalVar`, which the snippet never defines.
# Kept as shipped; see DESIGN.md.
PRICE_FIXED_CODE = """def calculate_total(items):
    total = 0
    for item in items:
        try:
            total = total + int(item['price'])  # Convert string to integer before adding
        except ValueError:
            raise ValueError(f"Invalid price value: {item['price']}")
    return total

data = [
    {'name': 'Book', 'price': '10'},
    {'name': 'Pen', 'price': '2'}
]

try:
    total = calculate_total(data)  # Result will be 12
    print(f"Total: {totalVar}")
except ValueError as e:
    print(f"Error: {e}")"""

PRICE_ALTERNATIVES = """# Solution 1: Convert during dictionary creation
data = [
    {'name': 'Book', 'price': int('10')},
    {'name': 'Pen', 'price': int('2')}
]

def calculate_total(items):
    total = 0
    for item in items:
        total = total + item['price']  # No conversion needed
    return total

# Solution 2: Use list comprehension with type conversion
def calculate_total(items):
    return sum(int(item['price']) for item in items)

# Solution 3: Use map and sum for functional approach
def calculate_total(items):
    return sum(map(lambda x: int(x['price']), items))

# Solution 4: Use list comprehension with validation
def calculate_total(items):
    try:
        total = sum(int(item['price']) for item in items)
        return total
    except ValueError as e:
        raise ValueError(f"Invalid price value found in items: {e}")
    except KeyError:
        raise KeyError("Missing 'price' key in one or more items")
    except Exception as e:
        raise Exception(f"Unexpected error calculating total: {e}")

# Solution 5: Using dataclasses for better type safety
from dataclasses import dataclass
from typing import List

@dataclass
class Item:
    name: str
    price: int  # Store price as integer to prevent type issues
    
    @classmethod
    def from_string_price(cls, name: str, price_str: str) -> 'Item':
        try:
            return cls(name=name, price=int(price_str))
        except ValueError:
            raise ValueError(f"Invalid price value: {price_str}")

def calculate_total(items: List[Item]) -> int:
    return sum(item.price for item in items)

# Usage:
items = [
    Item.from_string_price('Book', '10'),
    Item.from_string_price('Pen', '2')
]
total = calculate_total(items)"""

CONCAT_ALTERNATIVES = """# Solution 1: Convert string to int
num_str = "123"
result = int(num_str) + 456

# Solution 2: Use string formatting
num_str = "123"
result = f"{num_str}456"  # For string concatenation

# Solution 3: With error handling
def safe_add(str_num, int_num):
    try:
        return int(str_num) + int_num
    except ValueError:
        raise ValueError("String must be a valid number")"""

CANNED_REPORT_TEMPLATE = """1. Root Cause Analysis
----------------
• Technical Cause: Python is strongly typed and does not allow operations between incompatible types (string and integer)
• Common Scenarios: Dictionary values from external sources (like JSON, CSV, or user input) often store numbers as strings
• Technical Background: Python dictionary values maintain their original types, requiring explicit conversion for numeric operations

2. Step-by-Step Solution
----------------
• Step 1: Identify the data type issue
  The 'price' values in the dictionary are strings ('10' and '2') but used in numeric addition
• Step 2: Add type conversion
  Use int() to convert item['price'] to integer before adding to total
• Step 3: Add error handling
  Wrap the conversion in try-except to handle invalid price values
• Step 4: Test the solution
  Verify the total is calculated correctly (12 = 10 + 2)

3. Best Practices for Prevention
----------------
• Design Pattern: Data validation and type conversion at input boundaries
• Code Organization: Convert data types when reading from external sources, maintain consistent types in data structures
• Common Pitfalls: Assuming dictionary values have the correct type, missing error handling for invalid values
• Error Handling: Use try-except blocks to handle type conversion errors, validate data before operations

4. Code Examples
----------------
Before:
```{language}
{code}
```

After:
```{language}
{fixed}
```

Alternative Approaches:
```{language}
{alternatives}
```"""


def is_dictionary_price_pattern(source: str) -> bool:
    if any(idiom in source for idiom in _PRICE_INDEXING):
        return True
    return all(marker in source for marker in _PRICE_MARKERS)


def is_string_number_concat(source: str) -> bool:
    return "+" in source and _STRING_PLUS_NUMBER.search(source) is not None


def analyze_code(source: Optional[str]) -> Optional[CodeAnalysis]:
    """Return the canned fix for a recognised snippet, or None.

    The dictionary-price pattern wins over the string + number pattern.
    """
    if not source:
        return None

    if is_dictionary_price_pattern(source):
        return CodeAnalysis(fixed=PRICE_FIXED_CODE, alternatives=PRICE_ALTERNATIVES)

    if is_string_number_concat(source):
        # Only the first quoted operand is rewritten; anything else is left as-is.
        fixed = _QUOTED_OPERAND.sub(r'int("\1") + \2', source, count=1)
        return CodeAnalysis(fixed=fixed, alternatives=CONCAT_ALTERNATIVES)

    return None


def render_canned_report(*, code: str, analysis: CodeAnalysis, language: str) -> str:
    # Single pass over the template; substituted snippets are never rescanned.
    values = {
        "language": language,
        "code": code,
        "fixed": analysis.fixed,
        "alternatives": analysis.alternatives,
    }
    return _PLACEHOLDER.sub(lambda match: values[match.group(1)], CANNED_REPORT_TEMPLATE)
