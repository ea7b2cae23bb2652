from lispwalk.interpreter import Interpreter
from lispwalk.printer import to_lisp_string


# --- Example usage ---
def main():
    itp = Interpreter()

    examples = [
        '''
        (begin
            (import "math" as m)
            (map m:sqrt '(1 4 9 16)))
        ''',
        '''
        (begin
            (import "os.path")
            (path:join "a" "b" "c.lisp"))
        ''',
        '(display (explain-import "email.mime.text"))',
        '(display (explain-import "lispwalk_not_installed"))',
    ]

    for code in examples:
        print("Code:", code.strip())
        result = itp.eval(code)
        print()
        print("Result:", to_lisp_string(result))
        print("---")


if __name__ == "__main__":
    main()
