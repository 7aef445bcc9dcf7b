"""
Feed-forward neural network learner trained with torch.

Uses a full-batch training loop with validation loss tracking and early
stopping on an internal validation split.
"""
import copy
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Any

import numpy as np
import torch
from torch import nn

from .base import Learner


def get_optimizer(optimizer_name: str, parameters: Iterable, lr: float) -> torch.optim.Optimizer:
    if optimizer_name == 'Adam':
        return torch.optim.Adam(parameters, lr=lr)
    elif optimizer_name == 'SGD':
        return torch.optim.SGD(parameters, lr=lr, momentum=0.9)
    elif optimizer_name == 'AdamW':
        return torch.optim.AdamW(parameters, lr=lr)
    elif optimizer_name == 'RMSprop':
        return torch.optim.RMSprop(parameters, lr=lr)
    else:
        raise ValueError(f"Unknown optimizer: {optimizer_name}")


class MLPNetwork(nn.Module):
    """Fully connected network with ReLU activations."""

    def __init__(self, n_inputs: int, n_classes: int, hidden_sizes: Sequence[int] = (32,)):
        super().__init__()
        layers = []
        width = n_inputs
        for h in hidden_sizes:
            layers += [nn.Linear(width, h), nn.ReLU()]
            width = h
        layers.append(nn.Linear(width, n_classes))
        self.net = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.net(x)


@dataclass
class MLPModel:
    """Fitted network plus the input scaling computed on the training data."""
    network: MLPNetwork
    x_mean: np.ndarray
    x_std: np.ndarray
    train_losses: List[float] = field(default_factory=list)
    val_losses: List[float] = field(default_factory=list)
    best_iter: int = 0
    stopped_early: bool = False

    def scale(self, X: np.ndarray) -> torch.Tensor:
        return torch.tensor((X - self.x_mean) / self.x_std, dtype=torch.float32)


class TorchMLPLearner(Learner):
    """
    Multilayer perceptron classifier.

    Hyperparameters:
        hidden_sizes: Widths of the hidden layers.
        training_iters: Maximum number of full-batch optimizer steps.
        lr: Learning rate.
        optimizer: 'Adam', 'SGD', 'AdamW' or 'RMSprop'.
        weight_decay: L2 penalty added to the loss.
        val_fraction: Share of the training data held out for early stopping.
        early_stopping: Whether to stop when validation loss stalls.
        patience: Iterations without improvement before stopping.
        min_relative_delta: Minimum relative improvement threshold.
        check_interval: Check validation every N iterations.
    """

    DEFAULTS = {
        'hidden_sizes': (32,),
        'training_iters': 300,
        'lr': 0.01,
        'optimizer': 'Adam',
        'weight_decay': 0.0,
        'val_fraction': 0.2,
        'early_stopping': True,
        'patience': 50,
        'min_relative_delta': 0.001,
        'check_interval': 10,
    }

    def __init__(self, id: str = "classif.mlp", predict_type: str = "response",
                 short_name: Optional[str] = None, **params):
        unknown = set(params) - set(self.DEFAULTS)
        if unknown:
            raise ValueError(f"Unknown hyperparameters for {id}: {sorted(unknown)}")
        merged = {**self.DEFAULTS, **params}
        super().__init__(id, predict_type=predict_type, short_name=short_name, **merged)

    @property
    def supports_prob(self) -> bool:
        return True

    def _fit(self, X: np.ndarray, y: np.ndarray, class_levels: List[Any]) -> MLPModel:
        p = self.params
        positions = {level: j for j, level in enumerate(class_levels)}
        targets = np.array([positions[v] for v in y], dtype=np.int64)

        x_mean = X.mean(axis=0)
        x_std = X.std(axis=0)
        x_std[x_std == 0] = 1.0

        # Validation split for early stopping (torch generator follows the global seed)
        n = len(y)
        n_val = int(n * p['val_fraction']) if p['early_stopping'] else 0
        perm = torch.randperm(n).numpy()
        val_idx, train_idx = perm[:n_val], perm[n_val:]

        model = MLPModel(
            network=MLPNetwork(X.shape[1], len(class_levels), p['hidden_sizes']),
            x_mean=x_mean,
            x_std=x_std,
        )
        X_train = model.scale(X[train_idx])
        y_train = torch.tensor(targets[train_idx])
        X_val = model.scale(X[val_idx])
        y_val = torch.tensor(targets[val_idx])

        loss_fn = nn.CrossEntropyLoss()
        optimizer = get_optimizer(p['optimizer'], model.network.parameters(), p['lr'])
        if p['weight_decay']:
            for group in optimizer.param_groups:
                group['weight_decay'] = p['weight_decay']

        best_val_loss = float('inf')
        best_state = None
        patience_counter = 0

        model.network.train()
        for i in range(p['training_iters']):
            optimizer.zero_grad()
            loss = loss_fn(model.network(X_train), y_train)
            loss.backward()
            optimizer.step()
            model.train_losses.append(loss.item())

            if n_val == 0:
                continue

            model.network.eval()
            with torch.no_grad():
                val_loss = loss_fn(model.network(X_val), y_val).item()
            model.val_losses.append(val_loss)
            model.network.train()

            if (i + 1) % p['check_interval'] == 0:
                if best_val_loss != float('inf'):
                    relative_improvement = (best_val_loss - val_loss) / abs(best_val_loss)
                else:
                    relative_improvement = float('inf')

                if relative_improvement > p['min_relative_delta']:
                    best_val_loss = val_loss
                    best_state = copy.deepcopy(model.network.state_dict())
                    patience_counter = 0
                    model.best_iter = i + 1
                else:
                    patience_counter += p['check_interval']
                    if patience_counter >= p['patience']:
                        model.stopped_early = True
                        break

        if best_state is not None:
            model.network.load_state_dict(best_state)
        else:
            model.best_iter = len(model.train_losses)
        model.network.eval()
        return model

    def _predict(self, model: MLPModel, X: np.ndarray, class_levels: List[Any]):
        with torch.no_grad():
            logits = model.network(model.scale(X))
            proba = torch.softmax(logits, dim=1).numpy().astype(np.float64)
        levels = np.array(class_levels, dtype=object)
        response = levels[np.argmax(proba, axis=1)]
        if self.predict_type != "prob":
            return response, None
        return response, proba
