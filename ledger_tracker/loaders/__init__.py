from importlib import import_module

def get_loader(name, config):
    loader_path = config['loaders'].get(name)
    if not loader_path:
        raise ValueError(f"Unknown loader '{name}'.")
    module_name, cls_name = loader_path.rsplit('.', 1)
    mod = import_module(module_name)
    return getattr(mod, cls_name)()
