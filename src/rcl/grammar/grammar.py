"""Formal grammar rules for RCL.

This module documents the RCL grammar as EBNF-style string constants.
The grammar is implemented as a hand-written recursive-descent parser
(see ``rcl.parser``); these constants are the reference documentation
and are printed by ``rcl-parse grammar``.

Grammar notation used here:
    ``::=``     production rule
    ``|``       alternation
    ``( )``     grouping
    ``[ ]``     optional (zero or one)
    ``{ }``     zero or more repetitions
    ``STRING``  terminal: ``"[^"]*"`` on a single line, no escapes
    ``NUMBER``  terminal: binary, hexadecimal or decimal literal
    ``IDENT``   terminal: ``[_A-Za-z][-_A-Za-z0-9]*`` minus reserved words
    ``BLANK``   terminal: whitespace run holding two or more newlines
    ``COMMENT`` terminal: ``//`` through the end of the line
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Top-level and trivia
# ---------------------------------------------------------------------------

GRAMMAR_ROOT = """
source_file ::= { prefix } expr { COMMENT } EOF

prefix      ::= BLANK | COMMENT
"""

# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

GRAMMAR_STATEMENT = """
expr      ::= expr_stmt | expr_op
expr_stmt ::= stmt ';' { prefix } expr

stmt      ::= stmt_let
stmt_let  ::= 'let' IDENT '=' { prefix } expr
"""

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

GRAMMAR_OPERATOR = """
expr_op   ::= expr_unop | expr_not_op | binop_chain
expr_unop ::= unop ( expr_not_op | expr_unop )
unop      ::= 'not' | '-'

(* One chain rule per operator; every operator in a chain is the same.
   There is no precedence: 'a + b - c' is a syntax error. *)
binop_chain(op) ::= expr_not_op op expr_not_op { op expr_not_op }
binop           ::= 'and' | 'or' | '|' | '*' | '+' | '-' | '/'
                  | '<' | '<=' | '>' | '>=' | '==' | '!='
"""

# ---------------------------------------------------------------------------
# Postfix expressions and terms
# ---------------------------------------------------------------------------

GRAMMAR_POSTFIX = """
expr_not_op ::= term | expr_call | expr_index | expr_field
expr_call   ::= expr_not_op '(' [ call_args ] ')'
expr_index  ::= expr_not_op '[' expr ']'
expr_field  ::= expr_not_op '.' IDENT

call_args   ::= { prefix } expr [ ',' [ call_args | { prefix } ] ]

term ::= '{' [ seqs ] '}'
       | '[' [ seqs ] ']'
       | '(' [ seqs ] ')'
       | STRING
       | NUMBER
       | IDENT
"""

# ---------------------------------------------------------------------------
# Sequences
# ---------------------------------------------------------------------------

GRAMMAR_SEQUENCE = """
seqs ::= { prefix } seq [ ',' [ seqs | { prefix } ] ]

seq  ::= seq_elem
       | seq_assoc_expr
       | seq_assoc_ident
       | seq_stmt
       | seq_for
       | seq_if

seq_elem        ::= expr_op
seq_assoc_expr  ::= expr_op ':' expr
seq_assoc_ident ::= IDENT '=' expr
seq_stmt        ::= stmt ';' seq
seq_for         ::= 'for' idents 'in' expr ':' seq
seq_if          ::= 'if' expr ':' seq

idents ::= IDENT { ',' IDENT }
"""

# ---------------------------------------------------------------------------
# Lexical rules
# ---------------------------------------------------------------------------

GRAMMAR_LEXICAL = """
IDENT           ::= /[_A-Za-z][-_A-Za-z0-9]*/
STRING          ::= /"[^"\\n]*"/
NUMBER          ::= num_binary | num_hexadecimal | num_decimal
num_binary      ::= /0b[01_]*/
num_hexadecimal ::= /0x[0-9a-fA-F_]*/
num_decimal     ::= /(0|[1-9][0-9_]*)(\\.[0-9][0-9_]*)?([eE][-+]?[0-9][0-9_]*)?/
COMMENT         ::= /\\/\\/[^\\n]*\\n?/
BLANK           ::= /[ \\t\\r\\f]*\\n[ \\t\\r\\f]*\\n[ \\t\\r\\n\\f]*/
"""

# ---------------------------------------------------------------------------
# Combined grammar
# ---------------------------------------------------------------------------

FULL_GRAMMAR = "\n".join([
    GRAMMAR_ROOT,
    GRAMMAR_STATEMENT,
    GRAMMAR_OPERATOR,
    GRAMMAR_POSTFIX,
    GRAMMAR_SEQUENCE,
    GRAMMAR_LEXICAL,
])
