class NcmException(Exception):
    '''Base class to extend in order to throw exception in ncmstruct.

    It takes as first argument the chain of the layers that caused the
    exception, innermost first; each layer the exception crosses
    appends its own name.
    '''

    def __init__(self, chain, msg=''):
        self.chain = chain
        self.msg = msg
        super().__init__(msg)

    def __str__(self):
        if not self.chain:
            return self.msg

        return f'{self.msg} (at {".".join(reversed(self.chain))})'


class InvalidExtension(NcmException):
    pass


class MagicHeaderMismatch(NcmException):
    pass


class SeekFailure(NcmException):
    pass


class TruncatedRead(NcmException):
    '''The length prefix or the body is shorter than declared.'''
    pass


class IOFailure(NcmException):
    '''Error from the underlying device, or the handle was closed under us.'''
    pass
