import json
import os
import pathlib
import tempfile
from typing import Optional, Dict, Tuple

from solcx import compile_standard
from solcx.exceptions import SolcError

from lottery.config import lt_print, cfg
from lottery.utils.helpers import get_code_error_msg, get_contract_names


class SolcException(Exception):
    """ Solc reported error """
    pass


def compile_solidity_json(sol_filename: str, optimizer_runs: int = -1,
                          output_selection: Tuple = ('metadata', 'evm.bytecode', 'evm.deployedBytecode'),
                          output_dir: str = None) -> Dict:
    """
    Compile the given solidity file using solc json interface with the provided options.

    :param sol_filename: path to solidity file
    :param optimizer_runs: controls the optimize-runs flag, negative values disable the optimizer
    :param output_selection: determines which fields are included in the compiler output dict
    :param output_dir: compiler output directory
    :return: dictionary with the compilation results according to output_selection
    """
    solp = pathlib.Path(sol_filename)
    json_in = {
        'language': 'Solidity',
        'sources': {
            solp.name: {
                'urls': [
                    str(solp.absolute())
                ]
            }
        },
        'settings': {
            'outputSelection': {
                '*': {'*': list(output_selection)}
            },
        }
    }

    if optimizer_runs >= 0:
        json_in['settings']['optimizer'] = {
            'enabled': True,
            'runs': optimizer_runs
        }

    solc_version = cfg.solc_version
    cwd = os.getcwd()
    os.chdir(solp.absolute().parent)
    try:
        return compile_standard(json_in, allow_paths='.', output_dir=output_dir, solc_version=solc_version[1:])
    finally:
        os.chdir(cwd)


def compile_contract(sol_filename: str, contract_name: Optional[str] = None, optimizer_runs: Optional[int] = None) -> Dict:
    """
    Compile a single contract and return its interface.

    :param sol_filename: path to solidity file
    :param contract_name: name of the contract within the file (default: the first contract in the file)
    :param optimizer_runs: solc optimizer runs (default: cfg.opt_solc_optimizer_runs)
    :return: dict with the keys 'abi', 'bin' (creation code) and 'deployed_bin' (runtime code)
    """
    solp = pathlib.Path(sol_filename)
    contract_name = get_contract_names(sol_filename)[0] if contract_name is None else contract_name
    optimizer_runs = cfg.opt_solc_optimizer_runs if optimizer_runs is None else optimizer_runs
    jout = compile_solidity_json(sol_filename, optimizer_runs=optimizer_runs)['contracts'][solp.name][contract_name]
    return {
        'abi': json.loads(jout['metadata'])['output']['abi'],
        'bin': jout['evm']['bytecode']['object'],
        'deployed_bin': jout['evm']['deployedBytecode']['object']
    }


def _get_line_col(code: str, idx: int):
    """ Get line and column (1-based) from character index """
    line = len(code[:idx + 1].splitlines())
    col = (idx - (code[:idx + 1].rfind('\n') + 1))
    return line, col


def get_error_order_key(error):
    if 'sourceLocation' in error:
        return error['sourceLocation']['start']
    else:
        return -1


def check_compilation(filename: str, show_errors: bool = False):
    """
    Run the given file through solc without output to check for compiler errors.

    :param filename: file to dry-compile
    :param show_errors: if true, errors and warnings are printed
    :raise SolcException: raised if solc reports a compiler error
    """
    sol_name = pathlib.Path(filename).name
    with open(filename) as f:
        code = f.read()

    had_error = False
    try:
        errors = compile_solidity_json(filename, -1, ())
        if not show_errors:
            return
    except SolcError as e:
        if not show_errors:
            raise SolcException(e.message)
        errors = json.loads(e.stdout_data)

    # if solc reported any errors or warnings, print them and throw exception
    if 'errors' in errors:
        lt_print('')
        errors = sorted(errors['errors'], key=get_error_order_key)

        fatal_error_report = ''
        for error in errors:
            from lottery.utils.progress_printer import colored_print, TermColor
            is_error = error['severity'] == 'error'

            with colored_print(TermColor.FAIL if is_error else TermColor.WARNING):
                if 'sourceLocation' in error:
                    file = error['sourceLocation']['file']
                    if file == sol_name:
                        line, column = _get_line_col(code, error['sourceLocation']['start'])
                        report = f'{get_code_error_msg(line, column + 1, code.splitlines())}\n'
                        had_error |= is_error
                    else:
                        report = f"In imported file '{file}' idx: {error['sourceLocation']['start']}\n"
                else:
                    report = ''
                    had_error |= is_error
                report = f'\n{error["severity"].upper()}: {error["type"] if is_error else ""}\n{report}\n{error["message"]}'

                if is_error:
                    fatal_error_report += report
                else:
                    lt_print(report)

        lt_print('')
        if had_error:
            raise SolcException(fatal_error_report)


def compile_solidity_code(code: str, output_directory: Optional[str] = None, optimizer_runs: Optional[int] = None) -> Dict:
    """
    Compile the given solidity code with default settings.

    :param code: code to compile
    :param output_directory: [OPTIONAL] compiler output directory
    :param optimizer_runs: solc optimizer argument "runs", a negative value disables the optimizer
    :return: json compilation output
    """
    optimizer_runs = cfg.opt_solc_optimizer_runs if optimizer_runs is None else optimizer_runs
    if output_directory is not None and not os.path.exists(output_directory):
        os.makedirs(output_directory)

    with tempfile.TemporaryDirectory() as tmpdir:
        sol_file = os.path.join(tmpdir, 'contract.sol')
        with open(sol_file, 'w') as f:
            f.write(code)
        return compile_solidity_json(sol_file, output_dir=output_directory, optimizer_runs=optimizer_runs)
