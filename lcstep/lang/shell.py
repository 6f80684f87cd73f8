"""Handles interactive/command-line mode for lcstep. Uses cmd as backend."""

import cmd

from lcstep.lang.error import GenericException
from lcstep.lang.examples import EXAMPLES
from lcstep.lang.render import RenderOptions, render, render_plain


class Shell(cmd.Cmd):
    """Lambda calculus beta reducer shell."""
    intro = "Lambda calculus beta reducer :: Python backend\nType '?' or 'help' for more information."
    prompt = "λ> "
    step_prompt = "> "  # used once a term is loaded
    _tmp_prompt = "λ> "

    def __init__(self, sess, options=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.options = options if options is not None else RenderOptions()

    def _out(self, text=""):
        print(text, file=self.stdout)

    def show(self):
        """Prints the current term with its redex ids, followed by what the user can do next."""
        self._out()
        self._out(render(self.sess.current, self.options))
        self._out()

        if self.sess.is_normal_form:
            self._out("Normal form reached. Type 'reset' to enter a new λ-term.")
        else:
            count = self.sess.redex_count
            self._out(f"{count} redex(es) available. Reduce: [1-{count}]  |  undo  |  links  |  reset  |  exit")

    def default(self, line):
        """Loads line as a λ-term if none is loaded, otherwise reduces the redex numbered line."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = line.strip()

            if not self.sess.loaded:
                self.sess.load(line)
                self.prompt = self.step_prompt
                self.show()
                return

            try:
                redex_id = int(line)
            except ValueError:
                self.sess.error_handler.warn("'{}' is not a redex number or command", line, diagnosis=False)
                return

            self.sess.reduce(redex_id)
            self._out(f"\nAfter reducing redex [{redex_id}]:")
            self.show()

    def do_show(self, arg):
        """Shows the current λ-term."""
        if self.sess.loaded:
            self.show()

    def do_undo(self, arg):
        """Goes back one reduction step."""
        if self.sess.undo() is None:
            self._out("Nothing to undo.")
        else:
            self.show()

    def do_reset(self, arg):
        """Forgets the current λ-term so a new one can be entered."""
        self.sess.reset()
        self.prompt = self._tmp_prompt

    def do_links(self, arg):
        """Shows where the argument of the last reduced redex ended up."""
        info = self.sess.last_linking()
        if info is None:
            self._out("No reduction has been performed yet.")
            return

        lam = self.options.lam
        self._out(f"Redex [{info.source_id}]: {render_plain(info.redex, lam)}")
        self._out(f"  argument:   {render_plain(info.source_arg, lam)}")
        self._out(f"  parameter:  {len(info.parameter_uses)} occurence(s) of '{info.redex.func.param}' in the body")
        if not info.was_used:
            self._out("  result:     argument discarded")
        for node in info.substituted_nodes:
            self._out(f"  result:     {render_plain(node, lam)}")

    def do_history(self, arg):
        """Lists every step taken since the λ-term was loaded."""
        if not self.sess.loaded:
            self._out("No λ-term loaded.")
            return

        lam = self.options.lam
        self._out(f"Steps from: {self.sess.source}")
        for idx, step in enumerate(self.sess.linking_chain()):
            if step.linking_info is None:
                self._out(f"  {idx}: {render_plain(step.expr, lam)}")
            else:
                copies = len(step.linking_info.substituted_nodes)
                self._out(f"  {idx}: [{step.reduced_id}] -> {render_plain(step.expr, lam)}  ({copies} copies)")

    def do_examples(self, arg):
        """Lists the sample λ-terms, or loads the one numbered arg."""
        if not arg.strip():
            for idx, example in enumerate(EXAMPLES, 1):
                self._out(f"  {idx}. {example.name}: {example.description}")
                self._out(f"     {example.expr}")
            self._out("Type 'examples <number>' to load one.")
            return

        with self.sess.error_handler:
            idx = int(arg) if arg.strip().isdecimal() else 0
            if not 1 <= idx <= len(EXAMPLES):
                raise GenericException(f"example must be between 1 and {len(EXAMPLES)}, got '{{}}'", arg.strip(),
                                       diagnosis=False)

            self.do_reset("")
            self.default(EXAMPLES[idx - 1].expr)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self._out("Syntax:\n"
                  "  Variables: x, y, z, foo, x'\n"
                  "  Lambda:    λx.body  or  \\x.body\n"
                  "  Apply:     (f x) or f x\n\n"
                  "Enter a λ-term, then the number of the redex to reduce. Commands: show, undo, links,\n"
                  "history, examples, reset, exit.")

    def emptyline(self):
        """Re-renders the current λ-term instead of repeating the previous command."""
        if self.sess.loaded:
            self.show()
        return False

    def do_EOF(self, arg):
        """Exits the shell."""
        self._out()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits the shell."""
        return True

    do_quit = do_exit
    do_q = do_exit
