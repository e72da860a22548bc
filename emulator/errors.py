class MachineError(Exception):
    pass
