"""The object handed to mode callbacks."""


class Response:
    """Lets an ``on:begin``/``on:end`` callback veto the match it was given.

    Attributes:
        data (dict): Scratch space shared by the begin and end callbacks of one
            occurrence of a mode (e.g. to remember a heredoc terminator).
        isMatchIgnored (bool): Whether `ignoreMatch` has been called.
    """

    def __init__(self, data):
        self.data = data
        self.isMatchIgnored = False

    def ignoreMatch(self):
        self.isMatchIgnored = True
