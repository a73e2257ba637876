from __future__ import annotations

from typing import Callable, List, Optional

from . import nodes
from .module_info import ModuleInfo
from .tokens import STATEMENT_KEYWORDS, Token, TokenType

MAX_ARGUMENTS = 255

_EQUALITY = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
_COMPARISON = (
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
)
_TERM = (TokenType.MINUS, TokenType.PLUS)
_FACTOR = (TokenType.SLASH, TokenType.STAR, TokenType.PERCENT)
_UNARY = (TokenType.BANG, TokenType.MINUS)


class ParseError(Exception):
    """Raised to unwind out of a malformed statement; never escapes `parse()`."""


class Parser:
    """
    Recursive-descent parser producing a list of statements.

    Syntax errors are reported through `module_info`; the parser then skips to
    the next statement boundary and keeps going, so a single run diagnoses
    every independent malformed statement.
    """

    def __init__(self, tokens: List[Token], module_info: ModuleInfo):
        self.tokens = tokens
        self.module_info = module_info
        self._current = 0

    @property
    def current_token(self) -> Token:
        return self._peek()

    def parse(self) -> List[nodes.Stmt]:
        statements: List[nodes.Stmt] = []
        while not self._at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ----- declarations -----

    def _declaration(self) -> Optional[nodes.Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._check(TokenType.FUN, TokenType.DEF) and self._check_next(TokenType.IDENTIFIER):
                self._advance()
                return self._function("function")
            if self._match(TokenType.VAR, TokenType.CONST):
                return self._var_declaration(self._previous().type)
            if self._match(TokenType.IMPORT):
                return self._import_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _class_declaration(self) -> nodes.Class:
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self._match(TokenType.COLON, TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = nodes.Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._at_end():
            methods.append(self._function("method"))
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return nodes.Class(name, superclass, tuple(methods))

    def _function(self, kind: str) -> nodes.Function:
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        return self._function_body(kind, name)

    def _function_body(self, kind: str, name: Optional[Token]) -> nodes.Function:
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self._block()
        return nodes.Function(name, tuple(params), tuple(body))

    def _var_declaration(self, kind: TokenType) -> nodes.Var:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()
        elif kind is TokenType.CONST:
            self._error(name, "Constant must be initialized.")

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer, kind)

    def _import_declaration(self) -> nodes.Import:
        keyword = self._previous()
        if not self._match(TokenType.IDENTIFIER, TokenType.STRING):
            raise self._error(self._peek(), "Expect module name after 'import'.")
        name = self._previous()

        alias = None
        if self._match(TokenType.AS):
            alias = self._consume(TokenType.IDENTIFIER, "Expect alias name after 'as'.")

        self._consume(TokenType.SEMICOLON, "Expect ';' after import.")
        return nodes.Import(keyword, name, alias)

    # ----- statements -----

    def _statement(self) -> nodes.Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.BREAK):
            keyword = self._previous()
            self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
            return nodes.Break(keyword)
        if self._match(TokenType.CONTINUE):
            keyword = self._previous()
            self._consume(TokenType.SEMICOLON, "Expect ';' after 'continue'.")
            return nodes.Continue(keyword)
        if self._match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self._block()))
        return self._expression_statement()

    def _for_statement(self) -> nodes.Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[nodes.Stmt]
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR, TokenType.CONST):
            initializer = self._var_declaration(self._previous().type)
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        if condition is None:
            condition = nodes.Literal(True)
        loop: nodes.Stmt = nodes.While(condition, body, increment)
        if initializer is not None:
            loop = nodes.Block((initializer, loop))
        return loop

    def _if_statement(self) -> nodes.If:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenType.ELSE) else None
        return nodes.If(condition, then_branch, else_branch)

    def _print_statement(self) -> nodes.Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def _return_statement(self) -> nodes.Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def _while_statement(self) -> nodes.While:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self._statement())

    def _block(self) -> List[nodes.Stmt]:
        statements: List[nodes.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> nodes.Expression:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    # ----- expressions -----

    def _expression(self) -> nodes.Expr:
        return self._assignment()

    def _assignment(self) -> nodes.Expr:
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            if isinstance(expr, nodes.Get):
                return nodes.Set(expr.obj, expr.name, value)

            # Reported, but the parser is not confused, so no resync.
            self._error(equals, "Invalid assignment target.")

        return expr

    def _or(self) -> nodes.Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = nodes.Logical(expr, operator, self._and())
        return expr

    def _and(self) -> nodes.Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = nodes.Logical(expr, operator, self._equality())
        return expr

    def _binary(self, operand: Callable[[], nodes.Expr], operators) -> nodes.Expr:
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def _equality(self) -> nodes.Expr:
        return self._binary(self._comparison, _EQUALITY)

    def _comparison(self) -> nodes.Expr:
        return self._binary(self._term, _COMPARISON)

    def _term(self) -> nodes.Expr:
        return self._binary(self._factor, _TERM)

    def _factor(self) -> nodes.Expr:
        return self._binary(self._unary, _FACTOR)

    def _unary(self) -> nodes.Expr:
        if self._match(*_UNARY):
            operator = self._previous()
            return nodes.Unary(operator, self._unary())
        return self._call()

    def _call(self) -> nodes.Expr:
        expr = self._primary()
        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                break
        return expr

    def _finish_call(self, callee: nodes.Expr) -> nodes.Call:
        arguments: List[nodes.Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break
        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def _primary(self) -> nodes.Expr:
        if self._match(TokenType.FALSE):
            return nodes.Literal(False)
        if self._match(TokenType.TRUE):
            return nodes.Literal(True)
        if self._match(TokenType.NIL):
            return nodes.Literal(None)
        if self._match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return nodes.Super(keyword, method)

        if self._match(TokenType.THIS):
            return nodes.This(self._previous())
        if self._match(TokenType.IDENTIFIER):
            return nodes.Variable(self._previous())

        if self._match(TokenType.LAMBDA, TokenType.FUN, TokenType.DEF):
            return nodes.Lambda(self._function_body("lambda", None))

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    # ----- token helpers -----

    def _match(self, *types: TokenType) -> bool:
        if self._check(*types):
            self._advance()
            return True
        return False

    def _consume(self, kind: TokenType, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, *types: TokenType) -> bool:
        if self._at_end():
            return False
        return self._peek().type in types

    def _check_next(self, kind: TokenType) -> bool:
        if self._current + 1 >= len(self.tokens):
            return False
        return self.tokens[self._current + 1].type is kind

    def _advance(self) -> Token:
        if not self._at_end():
            self._current += 1
        return self._previous()

    def _at_end(self) -> bool:
        return self._peek().type is TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self._current]

    def _previous(self) -> Token:
        return self.tokens[self._current - 1]

    def _error(self, token: Token, message: str) -> ParseError:
        self.module_info.error(token, message)
        return ParseError(message)

    def _synchronize(self) -> None:
        self._advance()
        while not self._at_end():
            if self._previous().type is TokenType.SEMICOLON:
                return
            if self._peek().type in STATEMENT_KEYWORDS:
                return
            self._advance()
