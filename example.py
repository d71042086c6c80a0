"""This module is an example of how to use the python_sofm package to train a map with Iris.

The Iris dataset is loaded from scikit-learn and standardized.
The map is trained with autostop, and the captured objects of each neuron are printed together
with the labels of the patterns they captured.
"""

import logging
from collections import Counter

import pandas as pd
import sklearn.datasets  # type: ignore
import sklearn.preprocessing  # type: ignore

import python_sofm

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Load Iris dataset as a DataFrame of features and an array of labels
iris = sklearn.datasets.load_iris(as_frame=True)
features = pd.DataFrame(
    sklearn.preprocessing.StandardScaler().fit_transform(iris.data),
    columns=iris.data.columns,
)
target = iris.target_names[iris.target.to_numpy()]

# Instantiate the map with a honeycomb lattice and uniform grid initialization
som = python_sofm.SOM(
    features,
    rows=6,
    cols=6,
    epochs=200,
    conn_type="honeycomb",
    parameters=python_sofm.SOMParameters(
        init_type="uniform_grid", init_learn_rate=0.3, adaptation_threshold=1e-4
    ),
)

# Training with autostop
epochs = som.train(autostop=True, verbose=True)
print("Epochs:", epochs, "State:", som.get_state().value, sep=" ")
print("Quantization error:", som.quantization_error(), sep=" ")
print("Winner neurons:", som.get_winner_number(), "/", som.get_size(), sep=" ")

# Labels captured by each neuron
for neuron, objects in enumerate(som.get_capture_objects()):
    if objects:
        print(neuron, dict(Counter(target[list(objects)])), sep=": ")

print("Winner matrix:", som.get_winner_matrix(), sep="\n")
print("U-matrix:", som.get_distance_matrix().round(2), sep="\n")
