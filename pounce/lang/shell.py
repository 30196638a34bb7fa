"""Handles interactive/command-line mode for the pounce interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Pounce interpreter shell. The data stack and the defined words carry over from line to line."""
    intro = "Pounce interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary pounce program."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line + "\n")

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                if not self.sess.to_run:
                    return  # only definitions, nothing to run

                self.sess.run()

                if self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the pounce interpreter!\n\n"
              "Pounce is a concatenative, stack-based language. A program is a list of values and words:\n"
              "values are pushed onto the stack, words take their arguments from it.\n\n"
              "Try it out by typing '2 3 +', which leaves 5 on the stack. Define words with\n"
              "'[square] [dup *] compose', bind names to stack values with '5 [x] [x x *] pounce'\n"
              "and type 'words' to list every word there is.")

    def do_words(self, arg):
        """Lists the words of the session. Followed by more code, words is the pounce word instead."""
        if arg:
            return self.default(f"words {arg}")
        print(" ".join(self.sess.wd.names()))

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
